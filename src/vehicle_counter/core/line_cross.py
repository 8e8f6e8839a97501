"""
Line crossing test - does a reference line pass through a region's box?

Samples the line only at the box center's projections rather than clipping
the segment against the rectangle. Vertical and horizontal lines are never
reported as crossing, and a box the segment clips off-center can be
missed. Counts downstream are calibrated against exactly this behaviour.
"""

from ..models import ReferenceLine, Region


def intersects(line: ReferenceLine, box: Region) -> bool:
    """
    Check whether the line passes through the box.

    Evaluates the line at the box's center x and solves it at the box's
    center y. Either projection must fall inside the line's bounding
    interval and inside the box's span on the other axis.

    Args:
        line: Reference line (counting or speed)
        box: Candidate region

    Returns:
        True if the line crosses the box
    """
    if line.is_degenerate:
        return False

    min_x, min_y, max_x, max_y = line.bounds
    a = line.slope
    b = line.intercept

    center_x, center_y = box.center
    y_at_center_x = a * center_x + b
    x_at_center_y = (center_y - b) / a

    # Line evaluated at the center column, must land within the box height
    if (
        min_x <= center_x <= max_x
        and min_y <= y_at_center_x <= max_y
        and box.y_min <= y_at_center_x <= box.y_max
    ):
        return True

    # Line solved at the center row, must land within the box width
    return (
        min_x <= x_at_center_y <= max_x
        and min_y <= center_y <= max_y
        and box.x_min <= x_at_center_y <= box.x_max
    )
