"""
Tests for foreground region extraction and video source helpers
"""

import unittest

import cv2
import numpy as np

from vehicle_counter.config import ConfigValidationError
from vehicle_counter.core import BackgroundSubtractorExtractor, regions_from_mask
from vehicle_counter.core.camera import read_frame_rate


class TestRegionsFromMask(unittest.TestCase):
    """Test contour extraction from binary masks."""

    def test_empty_mask(self):
        """Test an all-background mask yields no regions."""
        mask = np.zeros((100, 200), dtype=np.uint8)
        self.assertEqual(regions_from_mask(mask), [])

    def test_single_blob(self):
        """Test bounding box and contour area of one rectangle."""
        mask = np.zeros((100, 200), dtype=np.uint8)
        mask[10:30, 20:60] = 255

        regions = regions_from_mask(mask)

        self.assertEqual(len(regions), 1)
        region = regions[0]
        self.assertEqual(region.bbox, (20, 10, 60, 30))
        # Contour runs through pixel centers, so area is (w-1)*(h-1)
        self.assertEqual(region.area, 39.0 * 19.0)

    def test_separate_blobs(self):
        """Test each blob becomes its own region."""
        mask = np.zeros((100, 200), dtype=np.uint8)
        mask[10:30, 20:60] = 255
        mask[50:90, 120:180] = 255

        regions = regions_from_mask(mask)

        self.assertEqual(len(regions), 2)
        boxes = sorted(r.bbox for r in regions)
        self.assertEqual(boxes, [(20, 10, 60, 30), (120, 50, 180, 90)])

    def test_holes_reported_as_regions(self):
        """Test contours are listed without hierarchy, holes included."""
        mask = np.zeros((100, 100), dtype=np.uint8)
        mask[10:60, 10:60] = 255
        mask[25:45, 25:45] = 0

        self.assertEqual(len(regions_from_mask(mask)), 2)


class TestBackgroundSubtractorExtractor(unittest.TestCase):
    """Test the MOG2-based extractor on synthetic frames."""

    def setUp(self):
        self.background = np.full((120, 160, 3), 100, dtype=np.uint8)

    def learn_background(self, extractor, frames=30):
        for _ in range(frames):
            extractor.extract(self.background)

    def test_static_scene_has_no_regions(self):
        """Test a learned static background produces no regions."""
        extractor = BackgroundSubtractorExtractor(learning_rate=0.5, smoothing=False)
        self.learn_background(extractor)
        self.assertEqual(extractor.extract(self.background), [])

    def test_moving_object_found(self):
        """Test a bright block on a learned background is extracted."""
        extractor = BackgroundSubtractorExtractor(learning_rate=0.01, smoothing=False)
        self.learn_background(extractor)

        frame = self.background.copy()
        cv2.rectangle(frame, (40, 30), (100, 80), (255, 255, 255), thickness=-1)
        regions = extractor.extract(frame)

        self.assertTrue(regions)
        largest = max(regions, key=lambda r: r.area)
        x_min, y_min, x_max, y_max = largest.bbox
        self.assertLessEqual(x_min, 45)
        self.assertGreaterEqual(x_max, 95)
        self.assertLessEqual(y_min, 35)
        self.assertGreaterEqual(y_max, 75)

    def test_mask_is_single_channel(self):
        """Test the foreground mask matches the frame size."""
        extractor = BackgroundSubtractorExtractor()
        mask = extractor.foreground_mask(self.background)
        self.assertEqual(mask.shape, (120, 160))
        self.assertEqual(mask.dtype, np.uint8)

    def test_from_config(self):
        """Test settings are read from the background section."""
        extractor = BackgroundSubtractorExtractor.from_config(
            {"background": {"history": 200, "learning_rate": 0.01, "smoothing": False}}
        )
        self.assertEqual(extractor.learning_rate, 0.01)
        self.assertFalse(extractor.smoothing)
        self.assertEqual(extractor.subtractor.getHistory(), 200)
        self.assertEqual(extractor.subtractor.getShadowValue(), 0)


class FakeCapture:
    def __init__(self, fps):
        self.fps = fps

    def get(self, prop):
        return self.fps


class TestReadFrameRate(unittest.TestCase):
    """Test frame rate discovery."""

    def test_container_rate(self):
        self.assertEqual(read_frame_rate(FakeCapture(29.97)), 29.97)

    def test_override_wins(self):
        self.assertEqual(read_frame_rate(FakeCapture(29.97), override=25), 25.0)

    def test_missing_rate_raises(self):
        """Test a source without a frame rate is a configuration error."""
        with self.assertRaises(ConfigValidationError):
            read_frame_rate(FakeCapture(0.0))


if __name__ == "__main__":
    unittest.main()
