"""
TrafficCounter - One atomic analysis step per frame.

Combines the FrameAnalyzer and the TransitEstimator, assigns video time to
each frame, and turns what they report into event dicts for the dispatcher.
"""

import logging
import threading
from dataclasses import replace
from typing import Any

from ..models import ReferenceLine, TrafficSnapshot
from ..utils.constants import (
    DEFAULT_AREA_THRESHOLD,
    DEFAULT_LINE_DISTANCE_M,
    DEFAULT_VEHICLE_SIZE_THRESHOLD,
)
from ..utils.event_schema import (
    EVENT_TYPE_RUN_SUMMARY,
    EVENT_TYPE_TRANSIT_COMPLETED,
    EVENT_TYPE_TRANSIT_EXPIRED,
    EVENT_TYPE_VEHICLE_COUNTED,
)
from .analyzer import FrameAnalyzer
from .transit import TransitEstimator

logger = logging.getLogger(__name__)


class TrafficCounter:
    """
    Per-stream counting and speed state.

    process_frame, reset and snapshot share one lock, so a frame's gate
    evaluation and queue mutation never interleave with another call even
    when frames are read on a different thread.
    """

    def __init__(self, analyzer: FrameAnalyzer, estimator: TransitEstimator):
        self.analyzer = analyzer
        self.estimator = estimator
        self.frame_index = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: dict, frames_per_second: float) -> "TrafficCounter":
        """
        Build a counter from a validated config dict.

        Args:
            config: Configuration with 'detection' and 'lines' sections
            frames_per_second: Frame rate of the source, already validated

        Returns:
            Configured TrafficCounter
        """
        detection = config.get("detection", {})
        lines = config["lines"]

        analyzer = FrameAnalyzer(
            counting_line=ReferenceLine.from_points(lines["counting"], name="counting"),
            speed_line=ReferenceLine.from_points(lines["speed"], name="speed"),
            area_threshold=detection.get("area_threshold", DEFAULT_AREA_THRESHOLD),
            vehicle_size_threshold=detection.get(
                "vehicle_size_threshold", DEFAULT_VEHICLE_SIZE_THRESHOLD
            ),
        )
        estimator = TransitEstimator(
            frames_per_second=frames_per_second,
            line_distance_m=lines.get("distance_m", DEFAULT_LINE_DISTANCE_M),
        )
        return cls(analyzer, estimator)

    @property
    def video_time(self) -> float:
        """Video position of the next frame to be processed, seconds."""
        return self.frame_index / self.estimator.frames_per_second

    def process_frame(self, regions) -> list[dict[str, Any]]:
        """
        Analyze one frame and advance the transit queue.

        Args:
            regions: Ordered regions from the extractor for this frame

        Returns:
            Events produced by this frame (possibly empty)
        """
        with self._lock:
            frame_index = self.frame_index
            video_time = self.video_time

            analysis = self.analyzer.analyze(regions)
            update = self.estimator.update(
                analysis.counted_class, analysis.speed_trigger, video_time
            )
            self.frame_index += 1

        events = []
        base = {"frame_index": frame_index, "video_time": video_time}

        if update.arrival is not None:
            region = analysis.counted_region
            events.append(
                {
                    "event_type": EVENT_TYPE_VEHICLE_COUNTED,
                    **base,
                    "sequence_id": update.arrival.sequence_id,
                    "vehicle_class": update.arrival.vehicle_class.value,
                    "area": float(region.area),
                    "bbox": region.bbox,
                }
            )

        if update.completed is not None:
            done = update.completed
            events.append(
                {
                    "event_type": EVENT_TYPE_TRANSIT_COMPLETED,
                    **base,
                    "sequence_id": done.sequence_id,
                    "vehicle_class": done.vehicle_class.value,
                    "speed_kmh": done.speed_kmh,
                    "elapsed_frames": done.elapsed_frames,
                }
            )

        for transit in update.expired:
            events.append(
                {
                    "event_type": EVENT_TYPE_TRANSIT_EXPIRED,
                    **base,
                    "sequence_id": transit.sequence_id,
                    "vehicle_class": transit.vehicle_class.value,
                    "elapsed_frames": transit.elapsed_frames,
                }
            )

        return events

    def snapshot(self) -> TrafficSnapshot:
        """Current counts and running averages per class."""
        with self._lock:
            return TrafficSnapshot(
                frame_index=self.frame_index,
                video_time=self.video_time,
                classes={vc: replace(agg) for vc, agg in self.estimator.aggregates.items()},
                total_counted=self.estimator.total_counted,
                pending=len(self.estimator.pending),
            )

    def summary_event(self) -> dict[str, Any]:
        """RUN_SUMMARY event for the end of a run; pending transits are discarded."""
        snap = self.snapshot()
        return {
            "event_type": EVENT_TYPE_RUN_SUMMARY,
            "frame_index": snap.frame_index,
            "video_time": snap.video_time,
            "classes": {vc.value: agg.to_dict() for vc, agg in snap.classes.items()},
            "total_counted": snap.total_counted,
            "pending_discarded": snap.pending,
        }

    def reset(self) -> None:
        """Return to the initial state without re-reading configuration."""
        with self._lock:
            self.analyzer.reset()
            self.estimator.reset()
            self.frame_index = 0
        logger.info("Counter reset")
