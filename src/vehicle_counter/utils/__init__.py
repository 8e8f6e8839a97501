"""
Utility modules for constants and abstractions.
"""

from .constants import (
    DEFAULT_AREA_THRESHOLD,
    DEFAULT_LINE_DISTANCE_M,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_VEHICLE_SIZE_THRESHOLD,
    ENV_VIDEO_SOURCE,
    SUMMARY_EVENT_INTERVAL,
)
from .event_schema import (
    EVENT_TYPE_RUN_SUMMARY,
    EVENT_TYPE_TRANSIT_COMPLETED,
    EVENT_TYPE_TRANSIT_EXPIRED,
    EVENT_TYPE_VEHICLE_COUNTED,
    get_event_summary,
    is_valid_event,
)
from .queue_protocol import CallbackQueueAdapter, EventQueue

__all__ = [
    "DEFAULT_AREA_THRESHOLD",
    "DEFAULT_LINE_DISTANCE_M",
    "DEFAULT_QUEUE_SIZE",
    "DEFAULT_VEHICLE_SIZE_THRESHOLD",
    "ENV_VIDEO_SOURCE",
    # Event schema
    "EVENT_TYPE_RUN_SUMMARY",
    "EVENT_TYPE_TRANSIT_COMPLETED",
    "EVENT_TYPE_TRANSIT_EXPIRED",
    "EVENT_TYPE_VEHICLE_COUNTED",
    "SUMMARY_EVENT_INTERVAL",
    "CallbackQueueAdapter",
    # Queue abstraction
    "EventQueue",
    "get_event_summary",
    "is_valid_event",
]
