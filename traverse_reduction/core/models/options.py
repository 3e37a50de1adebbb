"""
Reduction options for traverse computation.

This module defines the configuration of a reduction: the traverse
classification, how observed angles are turned into azimuths, and the
reporting thresholds.
"""

from dataclasses import dataclass
from typing import Dict, Any, Union
from enum import Enum


class TraverseType(Enum):
    """
    Traverse classification.

    - CLOSED_LOOP: The chain returns to a known point; misclosure is computed
      and distributed with the compass (Bowditch) rule
    - OPEN: The raw end point is accepted as-is; no misclosure, no correction
    """
    CLOSED_LOOP = "CLOSED_LOOP"
    OPEN = "OPEN"

    @classmethod
    def coerce(cls, value: Union['TraverseType', str]) -> 'TraverseType':
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class AngleMode(Enum):
    """
    How the horizontal angle of an observation is interpreted.

    - AZIMUTH: The angle is already an absolute azimuth (north = 0, clockwise)
    - TURNED: The angle is turned clockwise from the backsight; azimuths are
      carried forward from the start azimuth
    """
    AZIMUTH = "azimuth"
    TURNED = "turned"


@dataclass
class ReductionOptions:
    """
    Configuration options for traverse reduction.

    Attributes:
        angle_mode: Interpretation of observed angles (default: AZIMUTH)
        precision_sentinel: Precision reported when the misclosure is exactly
            zero (default: 999999)
        report_side_shot_drops: Add a message for each side shot whose
            station cannot be resolved (default: True)
        accept_precision: Minimum N of a 1:N precision for an ACCEPT field
            decision (default: 10000, standard engineering works)
    """

    angle_mode: AngleMode = AngleMode.AZIMUTH
    precision_sentinel: float = 999999.0
    report_side_shot_drops: bool = True
    accept_precision: float = 10000.0

    def __post_init__(self):
        """Validate options after initialization."""
        # Convert string to enum if needed
        if isinstance(self.angle_mode, str):
            self.angle_mode = AngleMode(self.angle_mode.strip().lower())

        if self.precision_sentinel <= 0:
            raise ValueError("precision_sentinel must be positive")

        if self.accept_precision <= 0:
            raise ValueError("accept_precision must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize options to dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "angle_mode": self.angle_mode.value,
            "precision_sentinel": self.precision_sentinel,
            "report_side_shot_drops": self.report_side_shot_drops,
            "accept_precision": self.accept_precision,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReductionOptions':
        """
        Create ReductionOptions from a dictionary.

        Args:
            data: Dictionary with option values

        Returns:
            New ReductionOptions instance
        """
        return cls(
            angle_mode=data.get("angle_mode", AngleMode.AZIMUTH.value),
            precision_sentinel=data.get("precision_sentinel", 999999.0),
            report_side_shot_drops=data.get("report_side_shot_drops", True),
            accept_precision=data.get("accept_precision", 10000.0),
        )

    @classmethod
    def default(cls) -> 'ReductionOptions':
        """
        Create options with default values.

        Returns:
            ReductionOptions with default settings
        """
        return cls()

    def __repr__(self) -> str:
        return (
            f"ReductionOptions("
            f"mode={self.angle_mode.value}, "
            f"accept=1:{self.accept_precision:.0f})"
        )
