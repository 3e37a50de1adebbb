"""
Core module for traverse reduction.

This module contains pure Python implementations with no file or network I/O.
It can be used standalone for testing or embedded in a host application.
"""

from .models import (
    Point,
    Observation,
    TraverseType,
    AngleMode,
    ReductionOptions,
    StationSetup,
    SetupObservation,
    FieldBook,
)

from .results import TraverseLeg, TraverseResult

from .solver import reduce_traverse, reduce_radiation, resolve_azimuths, reduce_field_book

from .geometry import (
    parse_angle,
    is_valid_angle,
    decimal_to_dms,
    normalize_azimuth,
    distance_2d,
    inverse_azimuth,
)

__all__ = [
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

    # Solvers
    "reduce_traverse",
    "reduce_radiation",
    "resolve_azimuths",
    "reduce_field_book",

    # Geometry
    "parse_angle",
    "is_valid_angle",
    "decimal_to_dms",
    "normalize_azimuth",
    "distance_2d",
    "inverse_azimuth",
]
