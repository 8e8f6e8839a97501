"""
Configuration loading and validation.

- validate_config_full: Comprehensive validation with errors/warnings
- prepare_runtime_config: Fill in defaults for the detector
- load_config_with_env: Apply environment variable overrides

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from .loader import (
    ConfigValidationError,
    load_config_with_env,
    prepare_runtime_config,
    print_validation_result,
)
from .schemas import (
    BackgroundConfig,
    Config,
    DetectionConfig,
    LinesConfig,
    VideoConfig,
    validate_config_pydantic,
)
from .validator import ValidationResult, validate_config_full

__all__ = [
    "BackgroundConfig",
    # Pydantic validation
    "Config",
    # Exception
    "ConfigValidationError",
    "DetectionConfig",
    "LinesConfig",
    "ValidationResult",
    "VideoConfig",
    # Config loading & preparation
    "load_config_with_env",
    "prepare_runtime_config",
    # Display
    "print_validation_result",
    "validate_config_full",
    "validate_config_pydantic",
]
