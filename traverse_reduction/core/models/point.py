"""
Point class for traverse reduction.

Conventions:
- Coordinates: Easting (X), Northing (Y) - plane grid
- Units: Meters for coordinates and elevation
- Point IDs: String type to allow alphanumeric station names
"""

import math
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .parsing import parse_bool, parse_optional_float


@dataclass
class Point:
    """
    Represents a survey point (station or detail point).

    A point can be:
    - A control point: known coordinates supplied by the user
    - Fixed: coordinates are never moved by the adjustment
    - Computed: a traverse station or side-shot target produced by the reduction

    Attributes:
        id: Unique identifier for the point (alphanumeric allowed)
        easting: X coordinate in meters
        northing: Y coordinate in meters
        elevation: Height in meters, None if unknown (never reduced)
        is_control: True for user-supplied control/datum points
        fixed: If True, coordinates are held during adjustment
        description: Free-text description (e.g. "TREE", "FENCE CORNER")
    """

    id: str
    easting: float
    northing: float
    elevation: Optional[float] = None
    is_control: bool = False
    fixed: bool = False
    description: str = ""

    def __post_init__(self):
        """Validate point data after initialization."""
        if not self.id:
            raise ValueError("Point ID cannot be empty")
        if not isinstance(self.id, str):
            raise ValueError("Point ID must be a string")

        # Ensure coordinates are numeric
        self.easting = float(self.easting)
        self.northing = float(self.northing)
        if not (math.isfinite(self.easting) and math.isfinite(self.northing)):
            raise ValueError(f"Point '{self.id}' coordinates must be finite")

        if self.elevation is not None:
            self.elevation = float(self.elevation)
        if self.description is None:
            self.description = ""

    @property
    def is_held(self) -> bool:
        """True if the point must keep its given coordinates."""
        return self.fixed or self.is_control

    def moved_to(self, easting: float, northing: float) -> 'Point':
        """Return a computed (non-control) copy of this point at new coordinates."""
        return Point(
            id=self.id,
            easting=easting,
            northing=northing,
            elevation=self.elevation,
            description=self.description,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize point to dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "id": self.id,
            "easting": self.easting,
            "northing": self.northing,
            "elevation": self.elevation,
            "is_control": self.is_control,
            "fixed": self.fixed,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        """
        Create a Point from a dictionary.

        Both snake_case keys and the camelCase keys written by the field
        application (``isControl``) are accepted.

        Args:
            data: Dictionary with point attributes

        Returns:
            New Point instance

        Raises:
            KeyError: If required fields are missing
            ValueError: If data is invalid, including null coordinates
        """
        point_id = str(data["id"]) if "id" in data else str(data["point_id"])
        return cls(
            id=point_id,
            easting=_coordinate(data, "easting", point_id),
            northing=_coordinate(data, "northing", point_id),
            elevation=parse_optional_float(data.get("elevation")),
            is_control=parse_bool(data.get("is_control", data.get("isControl"))),
            fixed=parse_bool(data.get("fixed")),
            description=str(data.get("description") or ""),
        )

    def __repr__(self) -> str:
        """Return string representation of the point."""
        status = "fixed" if self.fixed else ("control" if self.is_control else "computed")
        return f"Point({self.id}, E={self.easting:.3f}, N={self.northing:.3f}, {status})"


def _coordinate(data: Dict[str, Any], key: str, point_id: str) -> float:
    value = data[key]
    if value is None or value == '':
        raise ValueError(f"Point '{point_id}' has no {key}")
    return float(value)
