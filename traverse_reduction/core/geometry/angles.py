"""Angle text parsing and DMS formatting.

Field books record angles as text. Two notations are accepted:

- Degrees, minutes, seconds with separators: ``"120 30 15"``,
  ``"120-30-15"``, ``"120:30:15"``, ``"120°30'15\""`` or ``"120°30′15″"``
- A bare number, read as decimal degrees: ``"120.5"`` is 120.5 degrees
  (packed DDD.MMSS notation is NOT supported)

Parse failures are signalled with ``math.nan``; callers must treat that as
an incomplete observation and leave it out of the reduction.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Tuple

from .primitives import normalize_azimuth


_DMS_RE = re.compile(
    r"""^
    (?P<deg>\d+)[°\s:-]+
    (?P<min>\d+)[′'\s:-]+
    (?P<sec>\d+(?:\.\d+)?)[″"]?
    $""",
    re.VERBOSE,
)


def dms_to_decimal(degrees: int, minutes: int, seconds: float) -> float:
    """Convert degrees-minutes-seconds to decimal degrees."""
    sign = -1 if degrees < 0 else 1
    return sign * (abs(degrees) + minutes / 60.0 + seconds / 3600.0)


def parse_angle(text: Optional[str]) -> float:
    """
    Parse angle text into decimal degrees.

    Args:
        text: Angle as typed in the field book

    Returns:
        Decimal degrees, or ``math.nan`` if the text is empty, malformed,
        or has minutes/seconds of 60 or more
    """
    if not text:
        return math.nan
    clean = str(text).strip()

    m = _DMS_RE.match(clean)
    if m:
        minutes = int(m.group("min"))
        seconds = float(m.group("sec"))
        if minutes >= 60 or seconds >= 60:
            return math.nan
        return dms_to_decimal(int(m.group("deg")), minutes, seconds)

    try:
        value = float(clean)
    except ValueError:
        return math.nan
    # float() accepts "nan" and "inf"
    if not math.isfinite(value):
        return math.nan
    return value


def is_valid_angle(text: Optional[str]) -> bool:
    """True if the text parses and the angle lies in [0, 360)."""
    value = parse_angle(text)
    return not math.isnan(value) and 0.0 <= value < 360.0


def decimal_to_dms_parts(decimal_degrees: float) -> Tuple[int, int, int]:
    """Split an angle into whole (degrees, minutes, seconds).

    The angle is normalized to [0, 360) first. Seconds are truncated, not
    rounded; values within a microsecond of a whole second are snapped to it
    so that binary round-off does not drop a second.
    """
    if not math.isfinite(decimal_degrees):
        raise ValueError(f"Cannot format non-finite angle: {decimal_degrees}")
    dd = normalize_azimuth(decimal_degrees)
    total_seconds = int(math.floor(round(dd * 3600.0, 6)))
    degrees, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return degrees % 360, minutes, seconds


def decimal_to_dms(decimal_degrees: float) -> str:
    """Format decimal degrees as ``D°MM'SS"`` text, e.g. ``90°00'00"``."""
    d, m, s = decimal_to_dms_parts(decimal_degrees)
    return f"{d}°{m:02d}'{s:02d}\""
