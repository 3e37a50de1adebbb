"""
Traverse result classes.

This module defines the output data structures of a reduction: one
:class:`TraverseLeg` per consumed observation and the :class:`TraverseResult`
holding the legs, the closure statistics and the final point register.
"""

import json
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Any, Optional, Tuple

from ..models.point import Point
from ..models.observation import Observation
from ..models.options import TraverseType


def _iso_utc_now() -> str:
    """Return an ISO-8601 UTC timestamp ending with 'Z'."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _json_safe_value(value: Any) -> Any:
    """Convert non-JSON-safe floats (nan/inf) to None."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
    return value


def natural_key(point_id: str) -> Tuple:
    """Sort key ordering IDs like STN2 before STN10, case-insensitive."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in re.split(r"(\d+)", point_id)
        if part
    )


@dataclass
class TraverseLeg:
    """
    One reduced observation.

    Chain legs carry the forward-computed (raw) components and, after the
    Bowditch pass, the adjusted components and coordinates. Side-shot legs
    are never corrected; their adjusted values equal the raw ones.

    Attributes:
        from_point: Occupied station snapshot (forward-computed position for chain legs)
        to_point: Target snapshot (forward-computed position for chain legs)
        observation: Source observation
        calc_azimuth: Leg azimuth in decimal degrees [0, 360)
        calc_lat: Raw latitude (dN) in meters
        calc_dep: Raw departure (dE) in meters
        adj_lat: Adjusted latitude in meters
        adj_dep: Adjusted departure in meters
        adj_easting: Adjusted easting of the target
        adj_northing: Adjusted northing of the target
        is_side_shot: True for radiated detail points
    """

    from_point: Point
    to_point: Point
    observation: Observation
    calc_azimuth: float
    calc_lat: float
    calc_dep: float
    adj_lat: float = 0.0
    adj_dep: float = 0.0
    adj_easting: float = 0.0
    adj_northing: float = 0.0
    is_side_shot: bool = False

    @property
    def distance(self) -> float:
        """Observed horizontal distance of the leg."""
        return self.observation.horizontal_distance

    @property
    def correction_lat(self) -> float:
        """Northing correction applied by the adjustment."""
        return self.adj_lat - self.calc_lat

    @property
    def correction_dep(self) -> float:
        """Easting correction applied by the adjustment."""
        return self.adj_dep - self.calc_dep

    def to_dict(self) -> Dict[str, Any]:
        """Serialize leg to dictionary."""
        return {
            "from": self.from_point.to_dict(),
            "to": self.to_point.to_dict(),
            "observation": self.observation.to_dict(),
            "calc_azimuth": _json_safe_value(self.calc_azimuth),
            "calc_lat": _json_safe_value(self.calc_lat),
            "calc_dep": _json_safe_value(self.calc_dep),
            "adj_lat": _json_safe_value(self.adj_lat),
            "adj_dep": _json_safe_value(self.adj_dep),
            "adj_easting": _json_safe_value(self.adj_easting),
            "adj_northing": _json_safe_value(self.adj_northing),
            "is_side_shot": self.is_side_shot,
        }

    def __repr__(self) -> str:
        kind = "side" if self.is_side_shot else "leg"
        return (
            f"TraverseLeg({self.from_point.id}->{self.to_point.id}, "
            f"az={self.calc_azimuth:.4f}, E={self.adj_easting:.3f}, N={self.adj_northing:.3f}, {kind})"
        )


@dataclass
class TraverseResult:
    """
    Complete results of a traverse reduction.

    Attributes:
        legs: Chain legs in traverse order followed by side-shot legs
        misclosure_dist: Length of the closing error vector in meters
        misclosure_azimuth: Azimuth of the closing error vector in degrees
        precision: Total chain length / misclosure distance (1:N ratio)
        total_length: Sum of chain leg distances in meters
        delta_e: Closing error easting component (target - computed)
        delta_n: Closing error northing component (target - computed)
        adjusted_points: Point register keyed by ID: control points as given,
            chain stations at adjusted positions, side-shot targets at their
            radiated positions
        traverse_type: Traverse classification used
        is_valid: True if the reduction produced a usable result
        start_azimuth: Start azimuth supplied by the caller (decimal degrees)
        messages: Diagnostics (e.g. side shots that could not be resolved)
    """

    legs: List[TraverseLeg] = field(default_factory=list)
    misclosure_dist: float = 0.0
    misclosure_azimuth: float = 0.0
    precision: float = 0.0
    total_length: float = 0.0
    delta_e: float = 0.0
    delta_n: float = 0.0
    adjusted_points: Dict[str, Point] = field(default_factory=dict)
    traverse_type: TraverseType = TraverseType.CLOSED_LOOP
    is_valid: bool = True
    start_azimuth: float = 0.0

    # Messages
    messages: List[str] = field(default_factory=list)

    # Metadata
    timestamp: Optional[str] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = _iso_utc_now()

    @property
    def chain_legs(self) -> List[TraverseLeg]:
        """Legs of the main chain, in traverse order."""
        return [leg for leg in self.legs if not leg.is_side_shot]

    @property
    def side_shot_legs(self) -> List[TraverseLeg]:
        """Radiated side-shot legs, in input order."""
        return [leg for leg in self.legs if leg.is_side_shot]

    @property
    def precision_ratio(self) -> str:
        """Relative precision formatted as ``1:N``."""
        return f"1:{round(self.precision)}"

    def get_point(self, point_id: str) -> Point:
        """
        Get the final position of a point.

        Raises:
            KeyError: If point not found
        """
        if point_id in self.adjusted_points:
            return self.adjusted_points[point_id]
        raise KeyError(f"Point '{point_id}' not in results")

    def sorted_points(self) -> List[Point]:
        """Point register in natural ID order."""
        return sorted(self.adjusted_points.values(), key=lambda p: natural_key(p.id))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize traverse result to dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "metadata": {
                "timestamp": self.timestamp,
                "traverse_type": self.traverse_type.value,
                "start_azimuth": self.start_azimuth,
            },
            "closure": {
                "is_valid": self.is_valid,
                "total_length": _json_safe_value(self.total_length),
                "misclosure_dist": _json_safe_value(self.misclosure_dist),
                "misclosure_azimuth": _json_safe_value(self.misclosure_azimuth),
                "precision": _json_safe_value(self.precision),
                "delta_e": _json_safe_value(self.delta_e),
                "delta_n": _json_safe_value(self.delta_n),
            },
            "legs": [leg.to_dict() for leg in self.legs],
            "adjusted_points": [p.to_dict() for p in self.adjusted_points.values()],
            "messages": self.messages,
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize traverse result to JSON string.

        Args:
            indent: Number of spaces for indentation

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"TraverseResult({self.traverse_type.value}, legs={len(self.legs)}, "
            f"misclosure={self.misclosure_dist:.4f}m, {self.precision_ratio})"
        )
