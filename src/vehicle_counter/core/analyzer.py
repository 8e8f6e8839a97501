"""
FrameAnalyzer - Per-frame filtering, classification and gate evaluation.
"""

from dataclasses import dataclass, field

from ..models import ReferenceLine, Region, VehicleClass
from ..utils.constants import DEFAULT_AREA_THRESHOLD, DEFAULT_VEHICLE_SIZE_THRESHOLD
from .gate import CrossingGate


@dataclass
class FrameAnalysis:
    """
    Result of analyzing one frame.

    Attributes:
        counted_class: Class of the vehicle that newly engaged the counting line
        counted_region: Region that engaged the counting line on that frame
        speed_trigger: True if the speed line newly engaged
        good_regions: Regions that passed the area filter, in input order
    """

    counted_class: VehicleClass | None = None
    counted_region: Region | None = None
    speed_trigger: bool = False
    good_regions: list[Region] = field(default_factory=list)


class FrameAnalyzer:
    """
    Drives the counting-line and speed-line gates for each frame.

    Both gates see the same filtered regions every frame and never
    influence each other.
    """

    def __init__(
        self,
        counting_line: ReferenceLine,
        speed_line: ReferenceLine,
        area_threshold: int = DEFAULT_AREA_THRESHOLD,
        vehicle_size_threshold: int = DEFAULT_VEHICLE_SIZE_THRESHOLD,
    ):
        """
        Args:
            counting_line: Line where vehicles are counted and classified
            speed_line: Line that closes a transit
            area_threshold: Regions with area <= this are ignored
            vehicle_size_threshold: Area bound between small and medium
        """
        if area_threshold <= 0:
            raise ValueError(f"area_threshold must be positive, got {area_threshold}")
        if vehicle_size_threshold <= 0:
            raise ValueError(
                f"vehicle_size_threshold must be positive, got {vehicle_size_threshold}"
            )

        self.counting_gate = CrossingGate(counting_line)
        self.speed_gate = CrossingGate(speed_line)
        self.area_threshold = area_threshold
        self.vehicle_size_threshold = vehicle_size_threshold

    def analyze(self, regions, area_threshold: int | None = None) -> FrameAnalysis:
        """
        Analyze one frame's regions.

        Args:
            regions: Regions from the extractor, in extractor order
            area_threshold: Override for the configured area threshold

        Returns:
            FrameAnalysis for this frame
        """
        threshold = self.area_threshold if area_threshold is None else area_threshold
        good_regions = [r for r in regions if r.area > threshold]

        counting = self.counting_gate.evaluate(good_regions)
        speed = self.speed_gate.evaluate(good_regions)

        analysis = FrameAnalysis(speed_trigger=speed.triggered, good_regions=good_regions)
        if counting.triggered:
            analysis.counted_region = counting.region
            analysis.counted_class = VehicleClass.from_area(
                counting.region.area, self.vehicle_size_threshold
            )
        return analysis

    def reset(self) -> None:
        """Disengage both gates."""
        self.counting_gate.reset()
        self.speed_gate.reset()
