"""
Field book: station setups as recorded in the field.

A field book is a list of station setups. Each setup is the occupied
station plus the rows observed from it, with angle and distance still as
typed text. Flattening turns the complete rows into :class:`Observation`
objects; incomplete rows (blank target, unparseable angle or distance) are
left out rather than reduced as zero.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..geometry.angles import parse_angle
from .observation import Observation
from .options import TraverseType
from .parsing import parse_bool
from .point import Point


def parse_distance(text: Optional[str]) -> float:
    """Parse distance text in meters; ``math.nan`` if not a finite number >= 0."""
    if text is None:
        return math.nan
    try:
        value = float(str(text).strip())
    except ValueError:
        return math.nan
    if not math.isfinite(value) or value < 0:
        return math.nan
    return value


@dataclass
class SetupObservation:
    """
    One row of a station setup.

    Attributes:
        id: Row identifier
        target_id: ID of the sighted point
        angle_str: Horizontal angle as typed (DMS or decimal degrees)
        dist_str: Horizontal distance as typed (meters)
        is_traverse_leg: True if the target is the next chain station
    """

    id: str
    target_id: str = ""
    angle_str: str = ""
    dist_str: str = ""
    is_traverse_leg: bool = False

    def __post_init__(self):
        self.is_traverse_leg = parse_bool(self.is_traverse_leg)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "target_id": self.target_id,
            "angle_str": self.angle_str,
            "dist_str": self.dist_str,
            "is_traverse_leg": self.is_traverse_leg,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SetupObservation':
        return cls(
            id=str(data.get("id", "")),
            target_id=str(data.get("target_id", data.get("targetId", "")) or ""),
            angle_str=str(data.get("angle_str", data.get("angleStr", "")) or ""),
            dist_str=str(data.get("dist_str", data.get("distStr", "")) or ""),
            is_traverse_leg=data.get("is_traverse_leg", data.get("isTraverseLeg")),
        )


@dataclass
class StationSetup:
    """
    An instrument setup on an occupied station.

    Attributes:
        id: Setup identifier
        station_id: ID of the occupied station
        observations: Rows observed from the station, in field order
    """

    id: str
    station_id: str = ""
    observations: List[SetupObservation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "station_id": self.station_id,
            "observations": [o.to_dict() for o in self.observations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StationSetup':
        return cls(
            id=str(data.get("id", "")),
            station_id=str(data.get("station_id", data.get("stationId", "")) or ""),
            observations=[SetupObservation.from_dict(o) for o in data.get("observations", [])],
        )


def flatten_setups(setups: List[StationSetup]) -> List[Observation]:
    """
    Turn station setups into observations, in field order.

    Rows are skipped when the station or target is blank, the angle does
    not parse, or the distance is not a non-negative number.
    """
    out: List[Observation] = []
    for setup in setups:
        station = setup.station_id.strip()
        for row in setup.observations:
            target = row.target_id.strip()
            if not station or not target:
                continue
            angle = parse_angle(row.angle_str)
            dist = parse_distance(row.dist_str)
            if math.isnan(angle) or math.isnan(dist):
                continue
            out.append(Observation(
                id=row.id,
                from_point_id=station,
                to_point_id=target,
                horizontal_angle=angle,
                horizontal_distance=dist,
                is_traverse_leg=row.is_traverse_leg,
            ))
    return out


@dataclass
class FieldBook:
    """
    Everything needed to reduce a traverse: control, orientation and setups.

    Attributes:
        start_point: Fixed point the traverse starts from
        start_azimuth: Start azimuth as typed (DMS or decimal degrees)
        setups: Station setups in field order
        traverse_type: CLOSED_LOOP or OPEN
        extra_control_points: Further control points (closing points,
            reference objects)
    """

    start_point: Point
    start_azimuth: str = "0"
    setups: List[StationSetup] = field(default_factory=list)
    traverse_type: TraverseType = TraverseType.CLOSED_LOOP
    extra_control_points: List[Point] = field(default_factory=list)

    def __post_init__(self):
        self.traverse_type = TraverseType.coerce(self.traverse_type)

    @property
    def start_azimuth_degrees(self) -> float:
        """Parsed start azimuth; 0 when the text does not parse."""
        value = parse_angle(self.start_azimuth)
        return 0.0 if math.isnan(value) else value

    def control_points(self) -> List[Point]:
        """The start point followed by the extra control points."""
        return [self.start_point] + list(self.extra_control_points)

    def observations(self) -> List[Observation]:
        """Complete observations of all setups."""
        return flatten_setups(self.setups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_point": self.start_point.to_dict(),
            "extra_control_points": [p.to_dict() for p in self.extra_control_points],
            "start_azimuth": self.start_azimuth,
            "setups": [s.to_dict() for s in self.setups],
            "traverse_type": self.traverse_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FieldBook':
        start = data.get("start_point", data.get("startPoint"))
        if start is None:
            raise KeyError("Field book has no start point")
        extra = data.get("extra_control_points", data.get("extraControlPoints")) or []
        return cls(
            start_point=Point.from_dict(start),
            start_azimuth=str(data.get("start_azimuth", data.get("startAzimuth", "0"))),
            setups=[StationSetup.from_dict(s) for s in data.get("setups", [])],
            traverse_type=data.get("traverse_type", data.get("traverseType")) or TraverseType.CLOSED_LOOP,
            extra_control_points=[Point.from_dict(p) for p in extra],
        )
