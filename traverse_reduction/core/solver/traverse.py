"""traverse_reduction.core.solver.traverse

Traverse reduction with compass (Bowditch) rule adjustment.

Steps:
  1. Partition the observations into chain legs and side shots
  2. Forward (unadjusted) computation along the chain
  3. Misclosure of closed loops against the closing control point
  4. Bowditch distribution of the misclosure in proportion to leg length
  5. Side shots radiated from the adjusted chain stations

Input contract:
  - Every horizontal angle is an absolute azimuth (north = 0, clockwise).
    Angles turned from a backsight must be resolved first, see
    :mod:`traverse_reduction.core.solver.orientation`.
  - Observations carry finite numbers (enforced by :class:`Observation`).

The functions here are pure: inputs are never mutated and every call builds
fresh legs, points and results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..geometry.primitives import normalize_azimuth, lat_dep
from ..models.observation import Observation
from ..models.options import ReductionOptions, TraverseType
from ..models.point import Point
from ..results.traverse_result import TraverseLeg, TraverseResult


@dataclass
class _Closure:
    total_length: float = 0.0
    delta_e: float = 0.0
    delta_n: float = 0.0
    misclosure_dist: float = 0.0
    misclosure_azimuth: float = 0.0
    precision: float = 0.0


def partition_observations(observations: Iterable[Observation]) -> Tuple[List[Observation], List[Observation]]:
    """Split observations into (chain, side shots).

    If no observation is marked as a traverse leg, the whole list is the
    chain and there are no side shots.
    """
    observations = list(observations)
    if any(o.is_traverse_leg for o in observations):
        chain = [o for o in observations if o.is_traverse_leg]
        side = [o for o in observations if not o.is_traverse_leg]
        return chain, side
    return observations, []


def _compute_closure(
    target: Point,
    end_e: float,
    end_n: float,
    total_length: float,
    traverse_type: TraverseType,
    precision_sentinel: float,
) -> _Closure:
    """Misclosure of the forward-computed end point against the target."""
    if traverse_type is TraverseType.OPEN:
        # Open traverses accept the raw end point
        return _Closure(total_length=total_length)

    delta_e = target.easting - end_e
    delta_n = target.northing - end_n
    dist = math.hypot(delta_e, delta_n)
    return _Closure(
        total_length=total_length,
        delta_e=delta_e,
        delta_n=delta_n,
        misclosure_dist=dist,
        misclosure_azimuth=normalize_azimuth(math.degrees(math.atan2(delta_e, delta_n))),
        precision=total_length / dist if dist > 0 else precision_sentinel,
    )


def _reduce_chain(
    start_point: Point,
    chain: Sequence[Observation],
    target: Point,
    traverse_type: TraverseType,
    precision_sentinel: float,
) -> Tuple[List[TraverseLeg], _Closure]:
    """Forward computation, misclosure and Bowditch adjustment of the chain."""
    distances = np.array([o.horizontal_distance for o in chain], dtype=float)
    azimuths = [normalize_azimuth(o.horizontal_angle) for o in chain]
    lat, dep = lat_dep(azimuths, distances)

    # Forward pass: running cursor from the start point
    fwd_e = start_point.easting + np.cumsum(dep)
    fwd_n = start_point.northing + np.cumsum(lat)
    total_length = float(distances.sum())

    end_e = float(fwd_e[-1]) if len(chain) else start_point.easting
    end_n = float(fwd_n[-1]) if len(chain) else start_point.northing
    closure = _compute_closure(target, end_e, end_n, total_length, traverse_type, precision_sentinel)

    # Bowditch: correction proportional to each leg's share of total length
    if traverse_type is TraverseType.CLOSED_LOOP and total_length > 0:
        share = distances / total_length
        corr_e = closure.delta_e * share
        corr_n = closure.delta_n * share
    else:
        corr_e = np.zeros_like(distances)
        corr_n = np.zeros_like(distances)

    adj_dep = dep + corr_e
    adj_lat = lat + corr_n
    # Independent cursor seeded at the fixed start coordinates
    adj_e = start_point.easting + np.cumsum(adj_dep)
    adj_n = start_point.northing + np.cumsum(adj_lat)

    legs: List[TraverseLeg] = []
    prev_e, prev_n = start_point.easting, start_point.northing
    for i, obs in enumerate(chain):
        to_e, to_n = float(fwd_e[i]), float(fwd_n[i])
        legs.append(TraverseLeg(
            from_point=Point(id=obs.from_point_id, easting=prev_e, northing=prev_n),
            to_point=Point(id=obs.to_point_id, easting=to_e, northing=to_n),
            observation=obs,
            calc_azimuth=azimuths[i],
            calc_lat=float(lat[i]),
            calc_dep=float(dep[i]),
            adj_lat=float(adj_lat[i]),
            adj_dep=float(adj_dep[i]),
            adj_easting=float(adj_e[i]),
            adj_northing=float(adj_n[i]),
            is_side_shot=False,
        ))
        prev_e, prev_n = to_e, to_n

    return legs, closure


def _radiate(station: Point, obs: Observation) -> TraverseLeg:
    """Side-shot leg from a known station (never adjusted)."""
    azimuth = normalize_azimuth(obs.horizontal_angle)
    lat, dep = lat_dep([azimuth], [obs.horizontal_distance])
    d_n, d_e = float(lat[0]), float(dep[0])
    e = station.easting + d_e
    n = station.northing + d_n
    return TraverseLeg(
        from_point=station,
        to_point=Point(id=obs.to_point_id, easting=e, northing=n),
        observation=obs,
        calc_azimuth=azimuth,
        calc_lat=d_n,
        calc_dep=d_e,
        adj_lat=d_n,
        adj_dep=d_e,
        adj_easting=e,
        adj_northing=n,
        is_side_shot=True,
    )


def reduce_traverse(
    start_point: Point,
    start_azimuth: float,
    observations: Iterable[Observation],
    traverse_type: Union[TraverseType, str] = TraverseType.CLOSED_LOOP,
    end_point: Optional[Point] = None,
    options: Optional[ReductionOptions] = None,
) -> TraverseResult:
    """Reduce a traverse with side shots.

    Args:
        start_point: Fixed point the chain starts from
        start_azimuth: Start azimuth in decimal degrees (recorded on the
            result; chain angles are already azimuths)
        observations: Chain legs and side shots in field order
        traverse_type: CLOSED_LOOP or OPEN
        end_point: Closing control point of a closed traverse; defaults to
            the start point (loop)
        options: Reduction options (defaults if None)

    Returns:
        TraverseResult with chain legs, side-shot legs, closure statistics and
        the point register
    """
    options = options or ReductionOptions.default()
    traverse_type = TraverseType.coerce(traverse_type)
    chain, side_shots = partition_observations(observations)
    target = end_point or start_point

    legs, closure = _reduce_chain(
        start_point, chain, target, traverse_type, options.precision_sentinel
    )

    # Pass 1: control points as given, then adjusted chain stations
    points: Dict[str, Point] = {start_point.id: start_point}
    if end_point is not None and end_point.id not in points:
        points[end_point.id] = end_point
    for leg in legs:
        existing = points.get(leg.to_point.id)
        if existing is not None and existing.is_held:
            continue
        points[leg.to_point.id] = leg.to_point.moved_to(leg.adj_easting, leg.adj_northing)
    registered = set(points)

    # Pass 2: side shots from the register, in input order
    messages: List[str] = []
    side_legs: List[TraverseLeg] = []
    for obs in side_shots:
        station = points.get(obs.from_point_id)
        if station is None:
            if options.report_side_shot_drops:
                messages.append(
                    f"Side shot {obs.id} ({obs.from_point_id}->{obs.to_point_id}) skipped: "
                    f"station '{obs.from_point_id}' has no coordinates"
                )
            continue
        leg = _radiate(station, obs)
        side_legs.append(leg)
        if obs.to_point_id in registered:
            # Check shot onto a control point or chain station
            continue
        points[obs.to_point_id] = leg.to_point

    return TraverseResult(
        legs=legs + side_legs,
        misclosure_dist=closure.misclosure_dist,
        misclosure_azimuth=closure.misclosure_azimuth,
        precision=closure.precision,
        total_length=closure.total_length,
        delta_e=closure.delta_e,
        delta_n=closure.delta_n,
        adjusted_points=points,
        traverse_type=traverse_type,
        is_valid=True,
        start_azimuth=float(start_azimuth),
        messages=messages,
    )


def reduce_radiation(
    station_point: Point,
    observations: Iterable[Observation],
) -> TraverseResult:
    """Radiate every observation from a single fixed station.

    No misclosure and no adjustment; each observation becomes an unadjusted
    side-shot leg. ``total_length`` is the sum of the observed distances.
    """
    observations = list(observations)
    points: Dict[str, Point] = {station_point.id: station_point}
    legs: List[TraverseLeg] = []
    for obs in observations:
        leg = _radiate(station_point, obs)
        legs.append(leg)
        if obs.to_point_id != station_point.id:
            points[obs.to_point_id] = leg.to_point

    return TraverseResult(
        legs=legs,
        total_length=float(sum(o.horizontal_distance for o in observations)),
        adjusted_points=points,
        traverse_type=TraverseType.OPEN,
        is_valid=True,
    )
