"""traverse_reduction.core.solver.orientation

Turn observed horizontal angles into azimuths before reduction.

The reduction engine reads every horizontal angle as an absolute azimuth.
Field data recorded as angles turned clockwise from the backsight must pass
through :func:`resolve_azimuths` with ``AngleMode.TURNED`` first:

  - First chain leg:  azimuth = start azimuth + angle
  - Later chain legs: azimuth = previous leg azimuth + 180 + angle
  - Side shots:       azimuth = station orientation + angle, where the
    orientation is the start azimuth at the first station and the
    back-azimuth of the arriving chain leg elsewhere

One mode applies to the whole observation list.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Union

from ..geometry.primitives import normalize_azimuth
from ..models.observation import Observation
from ..models.options import AngleMode
from .traverse import partition_observations


def station_orientations(chain: Iterable[Observation], start_azimuth: float) -> Dict[str, float]:
    """Backsight azimuth (zero direction of the circle) at each chain station."""
    orientations: Dict[str, float] = {}
    prev_az = None
    for obs in chain:
        ref = start_azimuth if prev_az is None else prev_az + 180.0
        orientations.setdefault(obs.from_point_id, normalize_azimuth(ref))
        az = normalize_azimuth(ref + obs.horizontal_angle)
        orientations.setdefault(obs.to_point_id, normalize_azimuth(az + 180.0))
        prev_az = az
    return orientations


def resolve_azimuths(
    observations: Iterable[Observation],
    start_azimuth: float,
    mode: Union[AngleMode, str] = AngleMode.AZIMUTH,
) -> List[Observation]:
    """Return copies of the observations with azimuths as horizontal angles.

    Args:
        observations: Observations in field order
        start_azimuth: Azimuth of the reference direction at the first
            station, in decimal degrees
        mode: AZIMUTH (angles already azimuths) or TURNED

    Returns:
        New observations in the same order; inputs are not modified. Side
        shots from stations outside the chain are returned unchanged.
    """
    observations = list(observations)
    if isinstance(mode, str):
        mode = AngleMode(mode.strip().lower())

    if mode is AngleMode.AZIMUTH:
        return [replace(o, horizontal_angle=normalize_azimuth(o.horizontal_angle)) for o in observations]

    chain, _ = partition_observations(observations)
    all_chain = len(chain) == len(observations)
    orientations = station_orientations(chain, start_azimuth)

    out: List[Observation] = []
    prev_az = None
    for obs in observations:
        if all_chain or obs.is_traverse_leg:
            ref = start_azimuth if prev_az is None else prev_az + 180.0
            prev_az = normalize_azimuth(ref + obs.horizontal_angle)
            out.append(replace(obs, horizontal_angle=prev_az))
            continue
        ref = orientations.get(obs.from_point_id)
        if ref is None:
            out.append(replace(obs))
        else:
            out.append(replace(obs, horizontal_angle=normalize_azimuth(ref + obs.horizontal_angle)))
    return out
