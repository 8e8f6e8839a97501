"""
Event Schema - Contract between the detector and the dispatcher.

Events flow from the detector process to the dispatcher via
multiprocessing.Queue as plain dicts. All producers and consumers
(json_writer, csv_writer) must adhere to this schema.

Event Types:
    VEHICLE_COUNTED: A vehicle engaged the counting line and was classified
    TRANSIT_COMPLETED: A counted vehicle reached the speed line
    TRANSIT_EXPIRED: A counted vehicle never reached the speed line in time
    RUN_SUMMARY: Final aggregate snapshot at end of run
"""

from typing import Literal, TypedDict

# Event type constants
EVENT_TYPE_VEHICLE_COUNTED = "VEHICLE_COUNTED"
EVENT_TYPE_TRANSIT_COMPLETED = "TRANSIT_COMPLETED"
EVENT_TYPE_TRANSIT_EXPIRED = "TRANSIT_EXPIRED"
EVENT_TYPE_RUN_SUMMARY = "RUN_SUMMARY"

EventType = Literal[
    "VEHICLE_COUNTED", "TRANSIT_COMPLETED", "TRANSIT_EXPIRED", "RUN_SUMMARY"
]

VehicleClassName = Literal["small", "medium", "large"]


class BaseEvent(TypedDict, total=False):
    """
    Common fields present in all events.

    Required fields:
        event_type: Type of event
        frame_index: Zero-based index of the frame that produced the event
        video_time: Position in the video, seconds (frame_index / fps)
    """

    event_type: EventType
    frame_index: int
    video_time: float


class VehicleCountedEvent(BaseEvent):
    """
    VEHICLE_COUNTED event - counting line engaged by a new vehicle.

    Additional fields:
        sequence_id: Order in which vehicles were counted (1-based)
        vehicle_class: small, medium or large
        area: Contour area of the region that engaged the line
        bbox: (x_min, y_min, x_max, y_max) of that region
    """

    sequence_id: int
    vehicle_class: VehicleClassName
    area: float
    bbox: tuple[int, int, int, int]


class TransitCompletedEvent(BaseEvent):
    """
    TRANSIT_COMPLETED event - counted vehicle reached the speed line.

    Additional fields:
        sequence_id: Sequence id assigned when the vehicle was counted
        vehicle_class: small, medium or large
        speed_kmh: Transit speed between the two lines
        elapsed_frames: Frames between counting and speed line
    """

    sequence_id: int
    vehicle_class: VehicleClassName
    speed_kmh: float
    elapsed_frames: int


class TransitExpiredEvent(BaseEvent):
    """
    TRANSIT_EXPIRED event - pending vehicle waited longer than allowed.

    Its class count has already been decremented when this is emitted.
    """

    sequence_id: int
    vehicle_class: VehicleClassName
    elapsed_frames: int


class RunSummaryEvent(BaseEvent):
    """
    RUN_SUMMARY event - final aggregates for the run.

    Additional fields:
        classes: vehicle_class -> {count, samples, average_speed_kmh}
        total_counted: Every counting-line trigger, expired ones included
        pending_discarded: Transits still pending when the run ended
    """

    classes: dict[str, dict[str, float]]
    total_counted: int
    pending_discarded: int


# Union type for all events
Event = (
    VehicleCountedEvent | TransitCompletedEvent | TransitExpiredEvent | RunSummaryEvent
)

_REQUIRED_FIELDS = {
    EVENT_TYPE_VEHICLE_COUNTED: {"sequence_id", "vehicle_class"},
    EVENT_TYPE_TRANSIT_COMPLETED: {"sequence_id", "vehicle_class", "speed_kmh"},
    EVENT_TYPE_TRANSIT_EXPIRED: {"sequence_id", "vehicle_class"},
    EVENT_TYPE_RUN_SUMMARY: {"classes", "total_counted"},
}


def is_valid_event(event: dict) -> bool:
    """
    Validate that an event has required fields.

    Args:
        event: Event dictionary to validate

    Returns:
        True if event has its type's required fields
    """
    event_type = event.get("event_type")
    if event_type not in _REQUIRED_FIELDS:
        return False
    required = {"event_type", "video_time"} | _REQUIRED_FIELDS[event_type]
    return required.issubset(event.keys())


def get_event_summary(event: dict) -> str:
    """
    Get a human-readable summary of an event.

    Args:
        event: Event dictionary

    Returns:
        Summary string for logging
    """
    event_type = event.get("event_type", "UNKNOWN")
    seq = event.get("sequence_id", "?")
    vehicle_class = event.get("vehicle_class", "?")
    video_time = event.get("video_time", 0.0)

    if event_type == EVENT_TYPE_VEHICLE_COUNTED:
        area = event.get("area", 0)
        return (
            f"VEHICLE_COUNTED #{seq} {vehicle_class} area={area:.0f} t={video_time:.2f}s"
        )

    elif event_type == EVENT_TYPE_TRANSIT_COMPLETED:
        speed = event.get("speed_kmh", 0.0)
        return (
            f"TRANSIT_COMPLETED #{seq} {vehicle_class} {speed:.1f}km/h "
            f"t={video_time:.2f}s"
        )

    elif event_type == EVENT_TYPE_TRANSIT_EXPIRED:
        frames = event.get("elapsed_frames", 0)
        return f"TRANSIT_EXPIRED #{seq} {vehicle_class} after {frames} frames"

    elif event_type == EVENT_TYPE_RUN_SUMMARY:
        total = event.get("total_counted", 0)
        pending = event.get("pending_discarded", 0)
        return f"RUN_SUMMARY counted={total} pending_discarded={pending}"

    else:
        return f"{event_type} #{seq}"
