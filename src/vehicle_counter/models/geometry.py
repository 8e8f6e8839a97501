"""
Geometry data models - reference lines and detected regions.
"""

from dataclasses import dataclass

Point = tuple[float, float]


@dataclass(frozen=True)
class ReferenceLine:
    """
    A line segment drawn across the road (counting line or speed line).

    Set once before a run and never mutated. A line whose endpoints share
    an x or a y coordinate (after integer truncation) is degenerate and
    never reports a crossing.

    Attributes:
        start: First endpoint (x, y) in frame pixels
        end: Second endpoint (x, y) in frame pixels
        name: Label used in logs ("counting", "speed")
    """

    start: Point
    end: Point
    name: str = "line"

    @classmethod
    def from_points(cls, points, name: str = "line") -> "ReferenceLine":
        """Build from a config value like [[x1, y1], [x2, y2]]."""
        (x1, y1), (x2, y2) = points
        return cls(start=(float(x1), float(y1)), end=(float(x2), float(y2)), name=name)

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """Integer bounding interval (min_x, min_y, max_x, max_y) of the segment."""
        (x1, y1), (x2, y2) = self.start, self.end
        return (int(min(x1, x2)), int(min(y1, y2)), int(max(x1, x2)), int(max(y1, y2)))

    @property
    def is_degenerate(self) -> bool:
        """True for points and axis-aligned segments."""
        min_x, min_y, max_x, max_y = self.bounds
        return min_x == max_x or min_y == max_y

    @property
    def slope(self) -> float:
        """Slope of y = a*x + b. Undefined (ZeroDivisionError) for vertical lines."""
        (x1, y1), (x2, y2) = self.start, self.end
        return (y2 - y1) / (x2 - x1)

    @property
    def intercept(self) -> float:
        x1, y1 = self.start
        return y1 - self.slope * x1

    def to_list(self) -> list[list[float]]:
        return [list(self.start), list(self.end)]


@dataclass(frozen=True)
class Region:
    """
    A candidate object found in one frame.

    Attributes:
        x_min: Left edge in pixels
        y_min: Top edge in pixels
        x_max: Right edge in pixels
        y_max: Bottom edge in pixels
        area: Contour area (not the box area)
    """

    x_min: int
    y_min: int
    x_max: int
    y_max: int
    area: float

    @classmethod
    def from_rect(cls, x: int, y: int, w: int, h: int, area: float) -> "Region":
        """Build from an OpenCV boundingRect (x, y, width, height)."""
        return cls(x_min=x, y_min=y, x_max=x + w, y_max=y + h, area=area)

    @property
    def center(self) -> tuple[int, int]:
        """Box center, truncated to whole pixels."""
        return (int((self.x_min + self.x_max) / 2), int((self.y_min + self.y_max) / 2))

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return (int(self.x_min), int(self.y_min), int(self.x_max), int(self.y_max))
