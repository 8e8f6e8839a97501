"""
RegionExtractor Protocol - Common interface for foreground region sources.

Any method that turns a frame into candidate regions (background
subtraction, a pre-computed mask, a replayed detection log) can implement
this protocol and feed the counter.
"""

from typing import Protocol

import numpy as np

from .geometry import Region


class RegionExtractor(Protocol):
    """
    Protocol for foreground region extraction.

    Ordering of the returned regions is the extractor's responsibility and
    is significant: crossing gates take the first matching region.

    Example:
        extractor: RegionExtractor = BackgroundSubtractorExtractor()
        regions = extractor.extract(frame)
        events = counter.process_frame(regions)
    """

    def extract(self, frame: np.ndarray) -> list[Region]:
        """
        Find candidate regions in a frame.

        Args:
            frame: BGR frame (numpy array)

        Returns:
            Regions in extractor order
        """
        ...
