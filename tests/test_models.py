"""
Tests for data models
"""

import unittest

from vehicle_counter.models import (
    ClassAggregate,
    ReferenceLine,
    Region,
    TrafficSnapshot,
    VehicleClass,
)


class TestReferenceLine(unittest.TestCase):
    """Test ReferenceLine dataclass."""

    def test_from_points(self):
        """Test creating a line from config points."""
        line = ReferenceLine.from_points([[10, 20], [110, 70]], name="speed")
        self.assertEqual(line.start, (10.0, 20.0))
        self.assertEqual(line.end, (110.0, 70.0))
        self.assertEqual(line.name, "speed")

    def test_bounds_truncate(self):
        """Test bounds are truncated to whole pixels."""
        line = ReferenceLine(start=(10.9, 80.4), end=(2.5, 20.7))
        self.assertEqual(line.bounds, (2, 20, 10, 80))

    def test_slope_and_intercept(self):
        line = ReferenceLine(start=(0, 10), end=(100, 60))
        self.assertAlmostEqual(line.slope, 0.5)
        self.assertAlmostEqual(line.intercept, 10.0)

    def test_degenerate(self):
        self.assertTrue(ReferenceLine(start=(5, 0), end=(5, 50)).is_degenerate)
        self.assertTrue(ReferenceLine(start=(0, 5), end=(50, 5)).is_degenerate)
        self.assertFalse(ReferenceLine(start=(0, 0), end=(50, 5)).is_degenerate)

    def test_to_list(self):
        line = ReferenceLine(start=(1, 2), end=(3, 4))
        self.assertEqual(line.to_list(), [[1, 2], [3, 4]])


class TestRegion(unittest.TestCase):
    """Test Region dataclass."""

    def test_from_rect(self):
        """Test creating a region from an OpenCV rect."""
        region = Region.from_rect(10, 20, 30, 40, 900.0)
        self.assertEqual(region.bbox, (10, 20, 40, 60))
        self.assertEqual(region.area, 900.0)

    def test_center_truncates(self):
        """Test the center is truncated, not rounded."""
        self.assertEqual(Region(0, 0, 3, 3, 9.0).center, (1, 1))
        self.assertEqual(Region(10, 20, 21, 31, 9.0).center, (15, 25))


class TestAggregates(unittest.TestCase):
    """Test ClassAggregate and TrafficSnapshot."""

    def test_average_before_samples(self):
        """Test the average is zero until a speed is recorded."""
        aggregate = ClassAggregate(count=3)
        self.assertEqual(aggregate.average_speed, 0.0)

    def test_add_speed(self):
        aggregate = ClassAggregate()
        aggregate.add_speed(40.0)
        aggregate.add_speed(50.0)
        self.assertEqual(aggregate.samples, 2)
        self.assertAlmostEqual(aggregate.average_speed, 45.0)

    def test_snapshot_to_dict(self):
        """Test snapshot serialization uses class names."""
        classes = {vc: ClassAggregate() for vc in VehicleClass}
        classes[VehicleClass.LARGE].count = 2
        snap = TrafficSnapshot(
            frame_index=30, video_time=1.0, classes=classes, total_counted=2, pending=1
        )

        data = snap.to_dict()

        self.assertEqual(set(data["classes"]), {"small", "medium", "large"})
        self.assertEqual(data["classes"]["large"]["count"], 2)
        self.assertEqual(data["pending"], 1)
        self.assertEqual(snap.count(VehicleClass.LARGE), 2)

    def test_vehicle_class_is_str(self):
        """Test class values serialize as plain strings."""
        self.assertEqual(VehicleClass.MEDIUM, "medium")
        self.assertEqual(VehicleClass("large"), VehicleClass.LARGE)


if __name__ == "__main__":
    unittest.main()
