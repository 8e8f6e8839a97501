"""
Vehicle Detection - Producer

Reads frames, extracts foreground regions, runs the counter and puts the
resulting events on the dispatcher queue. Every run ends with a RUN_SUMMARY
event followed by the None sentinel.
"""

import logging
import time
from collections import deque
from multiprocessing import Event

import cv2

from ..models import RegionExtractor
from ..utils.constants import FPS_REPORT_INTERVAL, FPS_WINDOW_SIZE
from ..utils.queue_protocol import EventQueue
from .camera import open_video_source, read_frame_rate
from .counter import TrafficCounter
from .foreground import BackgroundSubtractorExtractor

logger = logging.getLogger(__name__)


def run_detection(
    data_queue: EventQueue, config: dict, shutdown_event: Event = None
) -> None:
    """
    Open the configured source and count vehicles until it ends.

    Args:
        data_queue: Receives event dicts, then None
        config: Prepared configuration (see prepare_runtime_config)
        shutdown_event: Set by the parent to stop after the current frame
    """
    cap = None
    loop_started = False
    try:
        video = config["video"]
        cap = open_video_source(str(video["source"]))
        fps = read_frame_rate(cap, video.get("fps_override"))
        counter = TrafficCounter.from_config(config, fps)
        extractor = BackgroundSubtractorExtractor.from_config(config)

        loop_started = True
        _detection_loop(cap, counter, extractor, data_queue, config, fps, shutdown_event)
    except Exception:
        # The loop sends its own summary and sentinel
        if not loop_started:
            data_queue.put(None)
        raise
    finally:
        if cap is not None:
            cap.release()


class _FrameTimer:
    """Processing rate over the last FPS_WINDOW_SIZE frames and the whole run."""

    def __init__(self):
        self.started = time.time()
        self.recent = deque(maxlen=FPS_WINDOW_SIZE)
        self.total_time = 0.0
        self.frames = 0

    def record(self, seconds: float) -> None:
        self.recent.append(seconds)
        self.total_time += seconds
        self.frames += 1

    @property
    def recent_fps(self) -> float:
        busy = sum(self.recent)
        return len(self.recent) / busy if busy > 0 else 0.0

    @property
    def overall_fps(self) -> float:
        return self.frames / self.total_time if self.total_time > 0 else 0.0

    @property
    def wall_minutes(self) -> float:
        return (time.time() - self.started) / 60


def _detection_loop(
    cap: cv2.VideoCapture,
    counter: TrafficCounter,
    extractor: RegionExtractor,
    data_queue: EventQueue,
    config: dict,
    fps: float,
    shutdown_event: Event = None,
) -> None:
    """Process frames until end of stream, shutdown or runtime.max_frames."""
    runtime = config.get("runtime", {})
    realtime = runtime.get("realtime", False)
    max_frames = runtime.get("max_frames")
    resize = config["video"].get("resize")
    frame_budget = 1.0 / fps

    timer = _FrameTimer()
    events_sent = 0

    logger.info(f"Counting started at {fps:.2f} fps")

    try:
        while not (shutdown_event and shutdown_event.is_set()):
            if max_frames is not None and timer.frames >= max_frames:
                logger.info(f"Stopping at frame limit {max_frames}")
                break

            tick = time.time()
            ok, frame = cap.read()
            if not ok:
                logger.info("Video source exhausted")
                break

            if resize:
                frame = cv2.resize(frame, tuple(resize))

            for event in counter.process_frame(extractor.extract(frame)):
                data_queue.put(event)
                events_sent += 1

            spent = time.time() - tick
            timer.record(spent)

            if realtime and spent < frame_budget:
                time.sleep(frame_budget - spent)

            if timer.frames % FPS_REPORT_INTERVAL == 0:
                _log_status(counter, timer, events_sent)
        else:
            logger.info("Shutdown requested")

    except KeyboardInterrupt:
        logger.info("Detection interrupted")
    finally:
        data_queue.put(counter.summary_event())
        data_queue.put(None)
        _log_final_stats(counter, timer, events_sent)


def _log_status(counter: TrafficCounter, timer: _FrameTimer, events_sent: int) -> None:
    """Periodic progress line with per-class counts and average speeds."""
    snap = counter.snapshot()
    per_class = ", ".join(
        f"{vc.value} {agg.count} @ {agg.average_speed:.1f} km/h"
        for vc, agg in snap.classes.items()
    )
    logger.info(
        f"[{timer.wall_minutes:.1f}min] video {snap.video_time:.1f}s | "
        f"{timer.recent_fps:.1f} fps | {events_sent} events | "
        f"{snap.pending} pending | {per_class}"
    )


def _log_final_stats(counter: TrafficCounter, timer: _FrameTimer, events_sent: int) -> None:
    snap = counter.snapshot()
    logger.info(
        f"Counting finished: {timer.frames} frames ({snap.video_time:.1f}s of video) "
        f"in {timer.wall_minutes:.1f} min, {timer.overall_fps:.1f} fps, "
        f"{events_sent} events"
    )
    for vc, agg in snap.classes.items():
        logger.info(
            f"  {vc.value}: {agg.count} counted, {agg.samples} timed, "
            f"avg {agg.average_speed:.1f} km/h"
        )
    if snap.pending:
        logger.info(f"  {snap.pending} vehicle(s) still between the lines, discarded")
