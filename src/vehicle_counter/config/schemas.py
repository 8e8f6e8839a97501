"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.constants import (
    DEFAULT_AREA_THRESHOLD,
    DEFAULT_BG_HISTORY,
    DEFAULT_BG_LEARNING_RATE,
    DEFAULT_BG_VAR_THRESHOLD,
    DEFAULT_FRAME_SIZE,
    DEFAULT_LINE_DISTANCE_M,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_VEHICLE_SIZE_THRESHOLD,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class VideoConfig(StrictModel):
    """Video source settings."""

    source: str = Field(..., min_length=1, description="File path, URL or device index")
    fps_override: float | None = Field(
        default=None, gt=0, description="Frame rate to use instead of the container's"
    )
    resize: tuple[int, int] | None = Field(
        default=DEFAULT_FRAME_SIZE, description="(width, height) frames are scaled to"
    )

    @field_validator("source", mode="before")
    @classmethod
    def coerce_source(cls, v):
        # Device indexes are commonly written as bare integers in YAML
        return str(v) if isinstance(v, int) else v

    @field_validator("resize")
    @classmethod
    def validate_resize(cls, v):
        if v is not None and (v[0] <= 0 or v[1] <= 0):
            raise ValueError("resize width and height must be positive")
        return v


class BackgroundConfig(StrictModel):
    """Background subtraction settings."""

    history: int = Field(default=DEFAULT_BG_HISTORY, gt=0)
    var_threshold: float = Field(default=DEFAULT_BG_VAR_THRESHOLD, gt=0)
    learning_rate: float = Field(default=DEFAULT_BG_LEARNING_RATE, ge=0.0, le=1.0)
    detect_shadows: bool = True
    smoothing: bool = True


class DetectionConfig(StrictModel):
    """Region filtering and size classification."""

    area_threshold: int = Field(
        default=DEFAULT_AREA_THRESHOLD, gt=0, description="Minimum region area"
    )
    vehicle_size_threshold: int = Field(
        default=DEFAULT_VEHICLE_SIZE_THRESHOLD,
        gt=0,
        description="Largest area still classified as a small vehicle",
    )


class LinesConfig(StrictModel):
    """Counting line, speed line and the real distance between them."""

    counting: tuple[tuple[float, float], tuple[float, float]]
    speed: tuple[tuple[float, float], tuple[float, float]]
    distance_m: float = Field(default=DEFAULT_LINE_DISTANCE_M, gt=0)


class OutputConfig(StrictModel):
    """Where completed transits are written."""

    json_dir: str = "data"
    format: Literal["jsonl", "csv"] = "jsonl"


class ConsoleOutputConfig(StrictModel):
    enabled: bool = True
    level: Literal["detailed", "summary", "silent"] = "detailed"


class RuntimeConfig(StrictModel):
    """Process and loop settings."""

    queue_size: int = Field(default=DEFAULT_QUEUE_SIZE, gt=0)
    realtime: bool = False
    detector_shutdown_timeout: float = Field(default=5, ge=0)
    dispatcher_startup_delay: float = Field(default=1, ge=0)
    max_frames: int | None = Field(default=None, gt=0)


class Config(StrictModel):
    """Complete configuration schema."""

    video: VideoConfig
    lines: LinesConfig
    background: BackgroundConfig = Field(default_factory=BackgroundConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    console_output: ConsoleOutputConfig = Field(default_factory=ConsoleOutputConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
