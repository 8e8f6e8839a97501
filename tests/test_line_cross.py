"""
Tests for the line crossing test
"""

import unittest

from vehicle_counter.core.line_cross import intersects
from vehicle_counter.models import ReferenceLine, Region


def box(x_min, y_min, x_max, y_max, area=5000.0):
    return Region(x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max, area=area)


class TestIntersects(unittest.TestCase):
    """Test the center-projection crossing heuristic."""

    def setUp(self):
        self.diagonal = ReferenceLine(start=(0, 0), end=(100, 100), name="counting")

    def test_box_centered_on_line(self):
        """Test a box whose center sits on the line."""
        self.assertTrue(intersects(self.diagonal, box(40, 40, 60, 60)))

    def test_box_away_from_line(self):
        """Test a box well outside the segment."""
        self.assertFalse(intersects(self.diagonal, box(200, 200, 220, 220)))

    def test_box_beside_line(self):
        """Test a box within the line's extent that the line misses."""
        self.assertFalse(intersects(self.diagonal, box(70, 0, 90, 20)))

    def test_endpoint_order_does_not_matter(self):
        """Test reversed endpoints give the same answer."""
        reversed_line = ReferenceLine(start=(100, 100), end=(0, 0))
        for region in (box(40, 40, 60, 60), box(200, 200, 220, 220)):
            self.assertEqual(
                intersects(self.diagonal, region), intersects(reversed_line, region)
            )

    def test_bounds_are_inclusive(self):
        """Test a box centered exactly on the segment endpoint."""
        self.assertTrue(intersects(self.diagonal, box(90, 90, 110, 110)))

    def test_vertical_line_never_crosses(self):
        """Test vertical lines are degenerate."""
        line = ReferenceLine(start=(50, 0), end=(50, 100))
        self.assertFalse(intersects(line, box(0, 0, 100, 100)))

    def test_horizontal_line_never_crosses(self):
        """Test horizontal lines are degenerate."""
        line = ReferenceLine(start=(0, 50), end=(100, 50))
        self.assertFalse(intersects(line, box(0, 0, 100, 100)))

    def test_degenerate_after_truncation(self):
        """Test a nearly horizontal line whose y bounds truncate to one value."""
        line = ReferenceLine(start=(10, 10.2), end=(100, 10.7))
        self.assertTrue(line.is_degenerate)
        self.assertFalse(intersects(line, box(0, 0, 200, 20)))

    def test_steep_line_caught_by_row_projection(self):
        """Test a steep line that only the center-row projection detects."""
        line = ReferenceLine(start=(0, 0), end=(10, 100))
        # At the center column (x=10) the line is at y=100, below the box
        self.assertTrue(intersects(line, box(0, 40, 20, 60)))

    def test_corner_clip_not_detected(self):
        """Test a segment clipping a box corner away from its center is missed."""
        # y = x passes through (40, 40)-(45, 45), inside this box
        self.assertFalse(intersects(self.diagonal, box(40, 0, 100, 45)))


if __name__ == "__main__":
    unittest.main()
