"""
TransitEstimator - Pairs counting-line and speed-line crossings into speeds.

Vehicles counted at the counting line wait in a FIFO queue. Every frame
each waiting vehicle ages by one frame; a speed-line crossing completes the
oldest one, and vehicles that wait longer than a plausible crossing time
are dropped and uncounted.

Per-vehicle lifecycle:
    pending(elapsed=0) -> pending(elapsed+1) per frame -> completed | expired
"""

import logging
import math
from collections import deque

from ..models import (
    ClassAggregate,
    PendingTransit,
    TransitEvent,
    TransitUpdate,
    VehicleClass,
)
from ..utils.constants import KMH_PER_MS, MIN_CROSSING_SPEED_MS

logger = logging.getLogger(__name__)


def compute_speed_kmh(
    elapsed_frames: int, frames_per_second: float, line_distance_m: float
) -> float:
    """Speed over the line gap given the frames it took to cover it."""
    duration = elapsed_frames / frames_per_second
    return (line_distance_m / duration) * KMH_PER_MS


def compute_max_wait_frames(frames_per_second: float, line_distance_m: float) -> int:
    """Frames a vehicle may take between the lines before it is given up on."""
    return math.floor(frames_per_second * (line_distance_m / MIN_CROSSING_SPEED_MS))


class TransitEstimator:
    """
    Pending-transit queue plus per-class count and speed aggregates.

    One instance per run; frame rate and line distance are fixed for its
    lifetime.
    """

    def __init__(self, frames_per_second: float, line_distance_m: float):
        """
        Args:
            frames_per_second: Frame rate of the analyzed video, > 0
            line_distance_m: Real distance between the two lines, > 0

        Raises:
            ValueError: If either value is not positive
        """
        if frames_per_second <= 0:
            raise ValueError(
                f"frames_per_second must be positive, got {frames_per_second}"
            )
        if line_distance_m <= 0:
            raise ValueError(f"line_distance_m must be positive, got {line_distance_m}")

        self.frames_per_second = frames_per_second
        self.line_distance_m = line_distance_m
        self.max_wait_frames = compute_max_wait_frames(frames_per_second, line_distance_m)

        self.pending: deque[PendingTransit] = deque()
        self.aggregates: dict[VehicleClass, ClassAggregate] = {
            vc: ClassAggregate() for vc in VehicleClass
        }
        self.total_counted = 0
        self._last_sequence_id = 0

        logger.debug(
            f"TransitEstimator: fps={frames_per_second} distance={line_distance_m}m "
            f"max_wait={self.max_wait_frames} frames"
        )

    def update(
        self,
        counted_class: VehicleClass | None,
        speed_trigger: bool,
        video_time: float = 0.0,
    ) -> TransitUpdate:
        """
        Advance the queue by one frame.

        Order matters: arrival, tick, completion, then timeout sweep.

        Args:
            counted_class: Class of a vehicle counted this frame, if any
            speed_trigger: True if the speed line newly engaged this frame
            video_time: Video position of this frame in seconds

        Returns:
            TransitUpdate describing what happened
        """
        result = TransitUpdate()

        if counted_class is not None:
            result.arrival = self._arrive(counted_class)

        for transit in self.pending:
            transit.tick()

        if speed_trigger:
            if self.pending:
                result.completed = self._complete(self.pending.popleft(), video_time)
            else:
                logger.debug("Speed line triggered with no pending vehicle - ignored")

        result.expired = self._sweep_expired()
        return result

    def _arrive(self, vehicle_class: VehicleClass) -> PendingTransit:
        self._last_sequence_id += 1
        transit = PendingTransit(
            sequence_id=self._last_sequence_id, vehicle_class=vehicle_class
        )
        self.pending.append(transit)
        self.aggregates[vehicle_class].count += 1
        self.total_counted += 1
        return transit

    def _complete(self, transit: PendingTransit, video_time: float) -> TransitEvent:
        speed_kmh = compute_speed_kmh(
            transit.elapsed_frames, self.frames_per_second, self.line_distance_m
        )
        self.aggregates[transit.vehicle_class].add_speed(speed_kmh)
        return TransitEvent(
            sequence_id=transit.sequence_id,
            vehicle_class=transit.vehicle_class,
            speed_kmh=speed_kmh,
            video_time=video_time,
            elapsed_frames=transit.elapsed_frames,
        )

    def _sweep_expired(self) -> list[PendingTransit]:
        expired = [t for t in self.pending if t.elapsed_frames > self.max_wait_frames]
        if not expired:
            return expired

        self.pending = deque(
            t for t in self.pending if t.elapsed_frames <= self.max_wait_frames
        )
        for transit in expired:
            self.aggregates[transit.vehicle_class].count -= 1
            logger.debug(
                f"Transit #{transit.sequence_id} ({transit.vehicle_class.value}) "
                f"expired after {transit.elapsed_frames} frames"
            )
        return expired

    def reset(self) -> None:
        """Drop pending transits and zero every aggregate."""
        self.pending.clear()
        for vc in VehicleClass:
            self.aggregates[vc] = ClassAggregate()
        self.total_counted = 0
        self._last_sequence_id = 0
