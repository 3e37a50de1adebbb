"""Lenient value parsing for records read from JSON and CSV."""

from typing import Any, Optional


def parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a value to boolean, handling string representations.

    ``"false"``, ``"0"`` and ``"no"`` are False; only the usual truthy
    spellings are True.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y', 'fixed')
    return bool(value)


def parse_optional_float(value: Any) -> Optional[float]:
    """Parse a value to optional float, handling empty strings and None."""
    if value is None or value == '' or value == 'None':
        return None
    return float(value)
