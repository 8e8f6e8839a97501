"""
CrossingGate - Edge-triggered latch over one reference line.

Turns the per-frame set of regions into a single "new crossing" signal.
While the same object keeps overlapping the line the gate stays engaged
and reports nothing; a frame with no overlap re-arms it.
"""

import logging
from dataclasses import dataclass

from ..models import ReferenceLine, Region
from .line_cross import intersects

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateResult:
    """
    Outcome of one gate evaluation.

    Attributes:
        triggered: True only on the frame the gate engaged
        region: First region (in input order) that crossed the line
    """

    triggered: bool
    region: Region | None = None

    @property
    def matched(self) -> bool:
        return self.region is not None


class CrossingGate:
    """Reference line plus an engaged/disengaged latch."""

    def __init__(self, line: ReferenceLine):
        self.line = line
        self.engaged = False

    def evaluate(self, regions) -> GateResult:
        """
        Evaluate this frame's regions against the line.

        Args:
            regions: Ordered regions for the current frame

        Returns:
            GateResult; triggered on the false -> true edge only
        """
        match = next((r for r in regions if intersects(self.line, r)), None)

        if match is None:
            self.engaged = False
            return GateResult(triggered=False)

        if self.engaged:
            return GateResult(triggered=False, region=match)

        self.engaged = True
        logger.debug(f"{self.line.name} line engaged by region {match.bbox}")
        return GateResult(triggered=True, region=match)

    def reset(self) -> None:
        self.engaged = False
