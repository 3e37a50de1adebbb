"""
Result classes for traverse reduction.

This module provides the output data structures:
- TraverseLeg: One reduced observation (raw and adjusted components)
- TraverseResult: Legs, closure statistics and the final point register
"""

from .traverse_result import TraverseLeg, TraverseResult, natural_key

__all__ = [
    "TraverseLeg",
    "TraverseResult",
    "natural_key",
]
