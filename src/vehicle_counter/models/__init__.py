"""
Consolidated data models for the vehicle counter.

This package contains all core data structures used across the application.
"""

from .extractor import RegionExtractor
from .geometry import Point, ReferenceLine, Region
from .vehicles import (
    ClassAggregate,
    PendingTransit,
    TrafficSnapshot,
    TransitEvent,
    TransitUpdate,
    VehicleClass,
)

__all__ = [
    # Aggregates
    "ClassAggregate",
    "PendingTransit",
    # Geometry
    "Point",
    "ReferenceLine",
    "Region",
    # Protocols
    "RegionExtractor",
    "TrafficSnapshot",
    "TransitEvent",
    "TransitUpdate",
    "VehicleClass",
]
