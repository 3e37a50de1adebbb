"""traverse_reduction.core.solver.field_book

Reduction of a recorded field book: flatten the complete rows, turn the
observed angles into azimuths, then reduce the traverse.
"""

from __future__ import annotations

from typing import Optional

from ..models.fieldbook import FieldBook
from ..models.options import ReductionOptions
from ..results.traverse_result import TraverseResult
from .orientation import resolve_azimuths
from .traverse import reduce_traverse


def reduce_field_book(
    book: FieldBook,
    options: Optional[ReductionOptions] = None,
) -> Optional[TraverseResult]:
    """
    Reduce a field book.

    Args:
        book: Field book with start point, start azimuth and setups
        options: Reduction options (defaults if None)

    Returns:
        TraverseResult, or None if no complete observation exists
    """
    options = options or ReductionOptions.default()
    observations = book.observations()
    if not observations:
        return None
    start_az = book.start_azimuth_degrees
    resolved = resolve_azimuths(observations, start_az, options.angle_mode)
    return reduce_traverse(
        book.start_point,
        start_az,
        resolved,
        book.traverse_type,
        options=options,
    )
