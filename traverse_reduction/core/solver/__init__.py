"""traverse_reduction.core.solver

Pure-Python traverse reduction (no file or network I/O).
"""

from .traverse import reduce_traverse, reduce_radiation, partition_observations
from .orientation import resolve_azimuths, station_orientations
from .field_book import reduce_field_book

__all__ = [
    "reduce_traverse",
    "reduce_radiation",
    "partition_observations",
    "resolve_azimuths",
    "station_orientations",
    "reduce_field_book",
]
