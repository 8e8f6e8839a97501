"""
Vehicle Counter

Counts vehicles crossing a reference line in a fixed-camera video, classifies
them by apparent size and estimates their speed from the time taken to reach
a second line a known distance away.

Supports a Terraform-like check:
  --validate  Check configuration validity

Package structure:
  core/       - Line crossing, gates, transit estimation, detection loop
  models/     - Geometry, vehicle classes, aggregates
  processor/  - Event dispatching and writers (JSONL, CSV)
  config/     - Configuration loading and validation
  utils/      - Constants, event schema, queue protocol
"""

__version__ = "1.0.0"

from .config import (
    ConfigValidationError,
    ValidationResult,
    validate_config_full,
)
from .core import (
    FrameAnalyzer,
    TrafficCounter,
    TransitEstimator,
    intersects,
    run_detection,
)
from .models import ReferenceLine, Region, VehicleClass
from .processor import dispatch_events

__all__ = [
    # Config
    "ConfigValidationError",
    # Core
    "FrameAnalyzer",
    # Models
    "ReferenceLine",
    "Region",
    "TrafficCounter",
    "TransitEstimator",
    "ValidationResult",
    "VehicleClass",
    # Processor
    "dispatch_events",
    "intersects",
    "run_detection",
    "validate_config_full",
]
