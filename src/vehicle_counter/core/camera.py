"""
Video source initialization and frame rate discovery.
"""

import logging
import time

import cv2

from ..config.loader import ConfigValidationError
from ..utils.constants import MAX_SOURCE_OPEN_ATTEMPTS, SOURCE_REOPEN_DELAY

logger = logging.getLogger(__name__)


def open_video_source(source: str) -> cv2.VideoCapture:
    """
    Open a video file or stream with retry logic.

    Args:
        source: File path, camera URL or device index as string

    Returns:
        OpenCV VideoCapture object

    Raises:
        RuntimeError: If the source cannot be opened after retries
    """
    target = int(source) if source.isdigit() else source

    for attempt in range(MAX_SOURCE_OPEN_ATTEMPTS + 1):
        logger.info(f"Opening video source: {source} (attempt {attempt + 1})")
        cap = cv2.VideoCapture(target)

        if cap.isOpened():
            logger.info("Video source opened")
            return cap

        if attempt < MAX_SOURCE_OPEN_ATTEMPTS:
            logger.warning(f"Failed to open, retrying in {SOURCE_REOPEN_DELAY}s...")
            time.sleep(SOURCE_REOPEN_DELAY)
        else:
            logger.error(
                f"Failed to open video source after {MAX_SOURCE_OPEN_ATTEMPTS + 1} attempts"
            )

    raise RuntimeError(f"Cannot open video source: {source}")


def read_frame_rate(cap: cv2.VideoCapture, override: float | None = None) -> float:
    """
    Determine the frame rate used for speed calculation.

    Args:
        cap: Opened capture
        override: Configured frame rate, wins over the container value

    Returns:
        Positive frames per second

    Raises:
        ConfigValidationError: If no positive frame rate is available
    """
    if override is not None:
        fps = float(override)
        source = "config"
    else:
        fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
        source = "container"

    if fps <= 0:
        raise ConfigValidationError(
            f"Frame rate from {source} is {fps} - set video.fps_override to a positive value"
        )

    logger.info(f"Frame rate: {fps:.2f} fps ({source})")
    return fps
