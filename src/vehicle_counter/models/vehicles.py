"""
Vehicle data models - classes, pending transits, aggregates and snapshots.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..utils.constants import MEDIUM_VEHICLE_FACTOR


class VehicleClass(str, Enum):
    """Size class of a counted vehicle, decided from contour area alone."""

    SMALL = "small"  # car
    MEDIUM = "medium"  # van
    LARGE = "large"  # lorry

    @classmethod
    def from_area(cls, area: float, size_threshold: float) -> "VehicleClass":
        """
        Classify a region by area.

        area <= size_threshold is small, area <= 1.9 * size_threshold is
        medium, anything bigger is large. Both bounds are inclusive.
        """
        if area <= size_threshold:
            return cls.SMALL
        if area <= MEDIUM_VEHICLE_FACTOR * size_threshold:
            return cls.MEDIUM
        return cls.LARGE


@dataclass
class PendingTransit:
    """
    A vehicle counted at the counting line, waiting for the speed line.

    Attributes:
        sequence_id: Counting order, starting at 1
        vehicle_class: Size class decided at the counting line
        elapsed_frames: Frames ticked since it was counted
    """

    sequence_id: int
    vehicle_class: VehicleClass
    elapsed_frames: int = 0

    def tick(self) -> None:
        self.elapsed_frames += 1


@dataclass
class ClassAggregate:
    """
    Running totals for one vehicle class.

    Attributes:
        count: Vehicles counted, minus those that expired
        speed_sum: Sum of completed transit speeds (km/h)
        samples: Number of completed transits
    """

    count: int = 0
    speed_sum: float = 0.0
    samples: int = 0

    @property
    def average_speed(self) -> float:
        """Mean completed speed in km/h, 0.0 before the first sample."""
        return self.speed_sum / self.samples if self.samples else 0.0

    def add_speed(self, speed_kmh: float) -> None:
        self.speed_sum += speed_kmh
        self.samples += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "samples": self.samples,
            "average_speed_kmh": self.average_speed,
        }


@dataclass(frozen=True)
class TransitEvent:
    """A completed transit, ready for export."""

    sequence_id: int
    vehicle_class: VehicleClass
    speed_kmh: float
    video_time: float
    elapsed_frames: int


@dataclass
class TransitUpdate:
    """
    Everything one TransitEstimator.update() call changed.

    Attributes:
        arrival: Transit queued this frame, if any
        completed: Transit matched against the speed line, if any
        expired: Transits evicted by the timeout sweep, in queue order
    """

    arrival: PendingTransit | None = None
    completed: TransitEvent | None = None
    expired: list[PendingTransit] = field(default_factory=list)


@dataclass
class TrafficSnapshot:
    """Per-frame aggregate view for display layers."""

    frame_index: int
    video_time: float
    classes: dict[VehicleClass, ClassAggregate]
    total_counted: int
    pending: int

    def count(self, vehicle_class: VehicleClass) -> int:
        return self.classes[vehicle_class].count

    def average_speed(self, vehicle_class: VehicleClass) -> float:
        return self.classes[vehicle_class].average_speed

    def to_dict(self) -> dict[str, Any]:
        return {
            "frame_index": self.frame_index,
            "video_time": self.video_time,
            "classes": {vc.value: agg.to_dict() for vc, agg in self.classes.items()},
            "total_counted": self.total_counted,
            "pending": self.pending,
        }
