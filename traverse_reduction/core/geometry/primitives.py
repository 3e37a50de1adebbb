"""traverse_reduction.core.geometry.primitives

Plane geometry helpers for traverse computation.

Conventions:
  - Coordinates: Easting = X, Northing = Y
  - Azimuth: North = 0, clockwise positive
  - Angles: decimal degrees at this boundary

Implementation detail:
  - Azimuth is computed using ``atan2(dE, dN)``.
  - Latitudes/departures use degree-exact sine and cosine, so cardinal
    azimuths (0, 90, 180, 270) produce exact zero components.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np


TAU = 2.0 * math.pi


def normalize_azimuth(deg: float) -> float:
    """Normalize an azimuth to [0, 360)."""
    a = deg % 360.0
    if a < 0:
        a += 360.0
    # -1e-17 % 360.0 rounds up to 360.0
    if a >= 360.0:
        a -= 360.0
    return a


def distance_2d(e1: float, n1: float, e2: float, n2: float) -> float:
    """Compute 2D horizontal distance (elevation is ignored)."""
    return math.hypot(e2 - e1, n2 - n1)


def inverse_azimuth(e1: float, n1: float, e2: float, n2: float) -> float:
    """Compute azimuth from (e1,n1) to (e2,n2) in decimal degrees.

    Returns an angle in [0, 360), with North=0 and clockwise positive.
    """
    rad = math.atan2(e2 - e1, n2 - n1)
    if rad < 0:
        rad += TAU
    return normalize_azimuth(math.degrees(rad))


def sincosd(deg) -> Tuple[np.ndarray, np.ndarray]:
    """Sine and cosine of angles given in degrees.

    The angle is first reduced to the nearest quadrant so that exact
    multiples of 90 degrees give exact 0/±1 results.
    """
    deg = np.asarray(deg, dtype=float)
    q = np.round(deg / 90.0)
    r = np.radians(deg - 90.0 * q)
    s = np.sin(r)
    c = np.cos(r)
    quadrant = q.astype(int) % 4
    sin = np.where(quadrant == 0, s, np.where(quadrant == 1, c, np.where(quadrant == 2, -s, -c)))
    cos = np.where(quadrant == 0, c, np.where(quadrant == 1, -s, np.where(quadrant == 2, -c, s)))
    return sin, cos


def lat_dep(azimuths: Sequence[float], distances: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Latitudes (dN) and departures (dE) for legs of given azimuth/length.

    Latitude  = distance * cos(azimuth)
    Departure = distance * sin(azimuth)
    """
    dist = np.asarray(distances, dtype=float)
    sin, cos = sincosd(azimuths)
    return dist * cos, dist * sin
