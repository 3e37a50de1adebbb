"""
Data models for traverse reduction.

This module provides the core data structures:
- Point: Survey station or detail point with coordinates
- Observation: Angle/distance measurement from an occupied station
- ReductionOptions: Configuration for the reduction
- StationSetup / SetupObservation / FieldBook: Field book as recorded
"""

from .point import Point
from .observation import Observation
from .options import ReductionOptions, TraverseType, AngleMode
from .fieldbook import (
    SetupObservation,
    StationSetup,
    FieldBook,
    flatten_setups,
    parse_distance,
)

__all__ = [
    # Point
    "Point",

    # Observations
    "Observation",

    # Options
    "ReductionOptions",
    "TraverseType",
    "AngleMode",

    # Field book
    "SetupObservation",
    "StationSetup",
    "FieldBook",
    "flatten_setups",
    "parse_distance",
]
