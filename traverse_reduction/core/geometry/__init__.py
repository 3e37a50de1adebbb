"""Geometry and angle utilities for traverse reduction."""

from .primitives import (
    normalize_azimuth,
    distance_2d,
    inverse_azimuth,
    sincosd,
    lat_dep,
)
from .angles import (
    parse_angle,
    is_valid_angle,
    dms_to_decimal,
    decimal_to_dms,
    decimal_to_dms_parts,
)

__all__ = [
    "normalize_azimuth",
    "distance_2d",
    "inverse_azimuth",
    "sincosd",
    "lat_dep",
    "parse_angle",
    "is_valid_angle",
    "dms_to_decimal",
    "decimal_to_dms",
    "decimal_to_dms_parts",
]
