"""
Observation class for traverse reduction.

Conventions:
- Angles: Decimal degrees (already parsed from DMS text)
- Azimuth: North = 0, clockwise positive (standard surveying convention)
- Distance: Meters, horizontal
- Observation IDs: Auto-generated UUID prefix or user-provided string

An observation is either a chain leg (``is_traverse_leg=True``), which
belongs to the backbone polygon and takes part in the misclosure and
adjustment, or a side shot radiated from an occupied station to a detail
point.
"""

import math
import uuid
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .parsing import parse_bool


def _generate_obs_id() -> str:
    """Generate a unique observation ID."""
    return str(uuid.uuid4())[:8].upper()


@dataclass
class Observation:
    """
    A single directed field measurement from an occupied station.

    Attributes:
        id: Unique identifier for the observation
        from_point_id: ID of the occupied (instrument) station
        to_point_id: ID of the target point
        horizontal_angle: Horizontal angle in decimal degrees
        horizontal_distance: Horizontal distance in meters (non-negative)
        is_traverse_leg: True if the observation is part of the main chain
        vertical_angle: Vertical angle in decimal degrees (recorded, not reduced)
        instrument_height: Height of instrument in meters (recorded, not reduced)
        target_height: Height of target in meters (recorded, not reduced)
    """

    id: str
    from_point_id: str
    to_point_id: str
    horizontal_angle: float
    horizontal_distance: float
    is_traverse_leg: bool = False
    vertical_angle: Optional[float] = None
    instrument_height: Optional[float] = None
    target_height: Optional[float] = None

    def __post_init__(self):
        """Validate observation data after initialization."""
        if not self.id:
            self.id = _generate_obs_id()

        if not self.from_point_id:
            raise ValueError("from_point_id cannot be empty")
        if not self.to_point_id:
            raise ValueError("to_point_id cannot be empty")

        self.horizontal_angle = float(self.horizontal_angle)
        self.horizontal_distance = float(self.horizontal_distance)
        if not math.isfinite(self.horizontal_angle):
            raise ValueError(f"Horizontal angle must be finite, got {self.horizontal_angle}")
        if not math.isfinite(self.horizontal_distance):
            raise ValueError(f"Horizontal distance must be finite, got {self.horizontal_distance}")
        if self.horizontal_distance < 0:
            raise ValueError(f"Distance cannot be negative, got {self.horizontal_distance}")

        self.is_traverse_leg = parse_bool(self.is_traverse_leg)

    @property
    def is_side_shot(self) -> bool:
        """True if the observation radiates a detail point."""
        return not self.is_traverse_leg

    def to_dict(self) -> Dict[str, Any]:
        """Serialize observation to dictionary."""
        return {
            "id": self.id,
            "from_point_id": self.from_point_id,
            "to_point_id": self.to_point_id,
            "horizontal_angle": self.horizontal_angle,
            "horizontal_distance": self.horizontal_distance,
            "is_traverse_leg": self.is_traverse_leg,
            "vertical_angle": self.vertical_angle,
            "instrument_height": self.instrument_height,
            "target_height": self.target_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Observation':
        """
        Create an Observation from a dictionary.

        Accepts snake_case keys and the camelCase keys of the field
        application (``fromPointId``, ``horizontalAngle``, ...).
        """
        def pick(*keys, default=None):
            for k in keys:
                if k in data and data[k] is not None:
                    return data[k]
            return default

        return cls(
            id=str(pick("id", "obs_id", default="")),
            from_point_id=str(pick("from_point_id", "fromPointId", "from_point", default="")),
            to_point_id=str(pick("to_point_id", "toPointId", "to_point", default="")),
            horizontal_angle=float(pick("horizontal_angle", "horizontalAngle", "angle")),
            horizontal_distance=float(pick("horizontal_distance", "horizontalDistance", "distance")),
            is_traverse_leg=pick("is_traverse_leg", "isTraverseLeg", default=False),
            vertical_angle=pick("vertical_angle", "verticalAngle"),
            instrument_height=pick("instrument_height", "instrumentHeight"),
            target_height=pick("target_height", "targetHeight"),
        )

    def __repr__(self) -> str:
        kind = "leg" if self.is_traverse_leg else "side"
        return (
            f"Observation({self.id}: {self.from_point_id}->{self.to_point_id}, "
            f"{self.horizontal_angle:.4f}deg, {self.horizontal_distance:.3f}m, {kind})"
        )
