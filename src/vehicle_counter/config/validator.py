"""
Configuration Validator - Validates config syntax and semantic correctness.

Schema checks come from the pydantic models; the semantic checks here cover
what a schema cannot express, such as lines the crossing test can never
trigger on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..models import ReferenceLine
from ..utils.constants import MIN_CROSSING_SPEED_MS
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)


def validate_config_full(config: dict) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate

    Returns:
        ValidationResult with errors, warnings, and derived configuration.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.errors.append("Configuration must be a mapping")
        result.valid = False
        return result

    try:
        parsed = validate_config_pydantic(config)
    except ValidationError as e:
        result.errors.extend(_format_pydantic_errors(e))
        result.valid = False
        return result

    _validate_lines(parsed, result)
    _validate_detection(parsed, result)
    _derive_settings(parsed, result)

    if result.errors:
        result.valid = False

    return result


def _format_pydantic_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic errors to 'dotted.path: message' strings."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "config"
        messages.append(f"{location}: {err['msg']}")
    return messages


def _validate_lines(config: Config, result: ValidationResult) -> None:
    """Warn about line geometry the crossing test cannot handle."""
    counting = ReferenceLine.from_points(config.lines.counting, name="counting")
    speed = ReferenceLine.from_points(config.lines.speed, name="speed")

    for line in (counting, speed):
        if line.is_degenerate:
            result.warnings.append(
                f"lines.{line.name} is zero-length, vertical or horizontal - "
                "it will never register a crossing"
            )

    if counting.bounds == speed.bounds:
        result.warnings.append("lines.counting and lines.speed cover the same segment")

    resize = config.video.resize
    if resize is not None:
        width, height = resize
        for line in (counting, speed):
            for x, y in (line.start, line.end):
                if not (0 <= x <= width and 0 <= y <= height):
                    result.warnings.append(
                        f"lines.{line.name} endpoint ({x:g}, {y:g}) is outside "
                        f"the {width}x{height} frame"
                    )


def _validate_detection(config: Config, result: ValidationResult) -> None:
    detection = config.detection
    if detection.area_threshold >= detection.vehicle_size_threshold:
        result.warnings.append(
            "detection.area_threshold >= detection.vehicle_size_threshold - "
            "no vehicle will be classified as small"
        )


def _derive_settings(config: Config, result: ValidationResult) -> None:
    """Record values computed from config for display."""
    counting = ReferenceLine.from_points(config.lines.counting)
    speed = ReferenceLine.from_points(config.lines.speed)

    result.derived["max_wait_seconds"] = config.lines.distance_m / MIN_CROSSING_SPEED_MS
    if config.video.fps_override is not None:
        result.derived["max_wait_frames"] = int(
            config.video.fps_override * result.derived["max_wait_seconds"]
        )
    result.derived["line_slopes"] = {
        name: (None if line.is_degenerate else line.slope)
        for name, line in (("counting", counting), ("speed", speed))
    }
    result.derived["output"] = f"{config.output.json_dir}/ ({config.output.format})"
