"""
Foreground Region Extraction

Learns the static background with a Gaussian mixture model and returns the
bounding boxes and areas of moving blobs for each frame.
"""

import logging

import cv2
import numpy as np

from ..models import Region
from ..utils.constants import (
    DEFAULT_BG_HISTORY,
    DEFAULT_BG_LEARNING_RATE,
    DEFAULT_BG_VAR_THRESHOLD,
)

logger = logging.getLogger(__name__)


class BackgroundSubtractorExtractor:
    """
    MOG2 background subtraction followed by contour extraction.

    Shadows are detected but written as background, so a vehicle's shadow
    never inflates its area.
    """

    # Bilateral filter parameters applied to the foreground mask
    SMOOTHING_DIAMETER = 2
    SMOOTHING_SIGMA_COLOR = 1600
    SMOOTHING_SIGMA_SPACE = 400

    def __init__(
        self,
        history: int = DEFAULT_BG_HISTORY,
        var_threshold: float = DEFAULT_BG_VAR_THRESHOLD,
        learning_rate: float = DEFAULT_BG_LEARNING_RATE,
        detect_shadows: bool = True,
        smoothing: bool = True,
    ):
        """
        Args:
            history: Number of frames that shape the background model
            var_threshold: Mahalanobis distance threshold for foreground pixels
            learning_rate: Background update rate per frame
            detect_shadows: Mark shadows separately (then drop them)
            smoothing: Apply a bilateral filter to the mask before contouring
        """
        self.learning_rate = learning_rate
        self.smoothing = smoothing
        self.subtractor = cv2.createBackgroundSubtractorMOG2(
            history=history, varThreshold=var_threshold, detectShadows=detect_shadows
        )
        self.subtractor.setShadowValue(0)
        logger.debug(
            f"Background model: history={history} var_threshold={var_threshold} "
            f"learning_rate={learning_rate}"
        )

    @classmethod
    def from_config(cls, config: dict) -> "BackgroundSubtractorExtractor":
        """Build from the 'background' config section."""
        bg = config.get("background", {})
        return cls(
            history=bg.get("history", DEFAULT_BG_HISTORY),
            var_threshold=bg.get("var_threshold", DEFAULT_BG_VAR_THRESHOLD),
            learning_rate=bg.get("learning_rate", DEFAULT_BG_LEARNING_RATE),
            detect_shadows=bg.get("detect_shadows", True),
            smoothing=bg.get("smoothing", True),
        )

    def foreground_mask(self, frame: np.ndarray) -> np.ndarray:
        """Update the background model and return the foreground mask."""
        mask = self.subtractor.apply(frame, learningRate=self.learning_rate)
        if self.smoothing:
            mask = cv2.bilateralFilter(
                mask,
                self.SMOOTHING_DIAMETER,
                self.SMOOTHING_SIGMA_COLOR,
                self.SMOOTHING_SIGMA_SPACE,
            )
        return mask

    def extract(self, frame: np.ndarray) -> list[Region]:
        """
        Find foreground regions in a frame.

        Args:
            frame: BGR frame

        Returns:
            One Region per contour, in the order OpenCV reports them
        """
        return regions_from_mask(self.foreground_mask(frame))


def regions_from_mask(mask: np.ndarray) -> list[Region]:
    """
    Convert a binary mask into regions.

    Args:
        mask: Single-channel uint8 mask, non-zero pixels are foreground

    Returns:
        Regions with contour area and bounding box
    """
    contours, _ = cv2.findContours(mask, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

    regions = []
    for contour in contours:
        x, y, w, h = cv2.boundingRect(contour)
        regions.append(Region.from_rect(x, y, w, h, float(cv2.contourArea(contour))))
    return regions
