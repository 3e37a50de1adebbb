"""
Traverse Reduction - field observations to adjusted plane coordinates

Reduces angle/distance observations taken from successive station setups
into coordinates, distributing the closing error of closed-loop traverses
with the compass (Bowditch) rule and radiating side shots from the
adjusted stations.

Conventions:
- Angles: Decimal degrees throughout, parsed from/formatted to DMS text at I/O boundary
- Azimuth: North = 0, clockwise positive (standard surveying convention)
- Coordinates: Easting (X), Northing (Y) - plane grid, no elevation reduction
- Distance: Meters (horizontal)
- Point IDs: String type to allow alphanumeric station names
"""

__version__ = "0.9.0"
__author__ = "Station One Survey Tools"

from .core.models import (
    Point,
    Observation,
    TraverseType,
    AngleMode,
    ReductionOptions,
    StationSetup,
    SetupObservation,
    FieldBook,
)
from .core.results import TraverseLeg, TraverseResult
from .core.solver import reduce_traverse, reduce_radiation, resolve_azimuths, reduce_field_book
from .core.geometry import parse_angle, is_valid_angle, decimal_to_dms

__all__ = [
    # Version
    "__version__",

    # Models
    "Point",
    "Observation",
    "TraverseType",
    "AngleMode",
    "ReductionOptions",
    "StationSetup",
    "SetupObservation",
    "FieldBook",

    # Results
    "TraverseLeg",
    "TraverseResult",

    # Engine
    "reduce_traverse",
    "reduce_radiation",
    "resolve_azimuths",
    "reduce_field_book",

    # Angles
    "parse_angle",
    "is_valid_angle",
    "decimal_to_dms",
]
