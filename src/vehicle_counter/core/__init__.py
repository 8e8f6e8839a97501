"""
Core counting components.

The pure per-frame pipeline (line_cross, gate, analyzer, transit, counter)
plus the default collaborators that feed it (camera, foreground, detector).
"""

from .analyzer import FrameAnalysis, FrameAnalyzer
from .counter import TrafficCounter
from .detector import run_detection
from .foreground import BackgroundSubtractorExtractor, regions_from_mask
from .gate import CrossingGate, GateResult
from .line_cross import intersects
from .transit import TransitEstimator, compute_max_wait_frames, compute_speed_kmh

__all__ = [
    "BackgroundSubtractorExtractor",
    "CrossingGate",
    "FrameAnalysis",
    "FrameAnalyzer",
    "GateResult",
    "TrafficCounter",
    "TransitEstimator",
    "compute_max_wait_frames",
    "compute_speed_kmh",
    "intersects",
    "regions_from_mask",
    "run_detection",
]
