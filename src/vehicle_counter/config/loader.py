"""
Configuration Loader - Environment overrides, runtime preparation, display.
"""

import logging
import os
import sys

from ..utils.constants import ENV_VIDEO_SOURCE
from .schemas import validate_config_pydantic
from .validator import ValidationResult

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when config validation fails."""


class Colors:
    """ANSI styles for terminal output, blanked when stdout is not a TTY."""

    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        for name in ("GREEN", "RED", "YELLOW", "CYAN", "BOLD", "RESET"):
            setattr(cls, name, "")


if not sys.stdout.isatty():
    Colors.disable()


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_VIDEO_SOURCE in os.environ:
        logger.info(f"Using video source from environment: {ENV_VIDEO_SOURCE}")
        config.setdefault("video", {})["source"] = os.environ[ENV_VIDEO_SOURCE]

    return config


def prepare_runtime_config(config: dict) -> dict:
    """
    Resolve every default so runtime code can index sections directly.

    Args:
        config: Configuration that already passed validate_config_full

    Returns:
        Plain dict with all sections and defaults filled in

    Raises:
        ConfigValidationError: If the config does not match the schema
    """
    try:
        return validate_config_pydantic(config).model_dump()
    except ValueError as e:
        raise ConfigValidationError(str(e)) from e


def print_validation_result(result: ValidationResult) -> None:
    """Terraform-style report: status line, errors, warnings, derived values."""
    c = Colors
    status = (
        f"{c.GREEN}✓ Configuration is valid{c.RESET}"
        if result.valid
        else f"{c.RED}✗ {len(result.errors)} error(s) in configuration{c.RESET}"
    )
    print(f"\n{c.BOLD}Vehicle counter configuration{c.RESET}\n{'=' * 60}\n\n{status}")

    sections = (
        ("Errors", c.RED, "✗", result.errors),
        ("Warnings", c.YELLOW, "!", result.warnings),
    )
    for title, color, mark, messages in sections:
        if messages:
            print(f"\n{color}{title}:{c.RESET}")
            for message in messages:
                print(f"  {color}{mark}{c.RESET} {message}")

    derived = result.derived
    if result.valid and derived:
        print(f"\n{c.CYAN}Derived settings:{c.RESET}")
        print(f"  Vehicles give up after {derived['max_wait_seconds']:.2f}s between lines")
        if "max_wait_frames" in derived:
            print(f"    = {derived['max_wait_frames']} frames at the configured frame rate")
        for name, slope in derived.get("line_slopes", {}).items():
            shown = "degenerate, never crosses" if slope is None else f"{slope:.3f}"
            print(f"  {name} line slope: {shown}")
        print(f"  Output: {derived['output']}")

    print()
