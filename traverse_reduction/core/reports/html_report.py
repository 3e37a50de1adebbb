"""HTML report generation (no I/O beyond the optional save helper).

Produces a standalone HTML report for a
:class:`~traverse_reduction.core.results.traverse_result.TraverseResult`.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..geometry.angles import decimal_to_dms
from ..geometry.primitives import inverse_azimuth, normalize_azimuth
from ..models.options import TraverseType
from ..results.traverse_result import TraverseLeg, TraverseResult


@dataclass
class StationGroup:
    """
    Legs observed from one setup, with the setup's circle orientation.

    Attributes:
        station_id: Occupied station
        orientation: Azimuth of the zero direction of the circle in degrees
        ref_info: How the orientation was found: ``"Start Az Input"`` at the
            start station, ``"BS: <id> (Comp)"`` when computed from an
            observed backsight, ``"BS: <id> (Prop)"`` when carried from the
            arriving leg, empty if the station was never reached by a leg
        legs: Legs observed from the station, in result order
    """

    station_id: str
    orientation: float
    ref_info: str
    legs: List[TraverseLeg] = field(default_factory=list)


def _setup_orientation(result: TraverseResult, station_id: str, legs: List[TraverseLeg]) -> Tuple[float, str]:
    start_id = next(iter(result.adjusted_points), None)
    if station_id == start_id:
        return normalize_azimuth(result.start_azimuth), "Start Az Input"

    incoming = next((leg for leg in result.legs if leg.to_point.id == station_id), None)
    if incoming is None:
        return 0.0, ""

    backsight_id = incoming.from_point.id
    bs_leg = next((leg for leg in legs if leg.to_point.id == backsight_id), None)
    if bs_leg is None:
        return normalize_azimuth(incoming.calc_azimuth + 180.0), f"BS: {backsight_id} (Prop)"

    # Final back bearing minus the circle reading on the backsight
    here = result.adjusted_points.get(station_id, incoming.to_point)
    there = result.adjusted_points.get(backsight_id, incoming.from_point)
    back_bearing = inverse_azimuth(here.easting, here.northing, there.easting, there.northing)
    return normalize_azimuth(back_bearing - bs_leg.observation.horizontal_angle), f"BS: {backsight_id} (Comp)"


def group_legs_by_station(result: TraverseResult) -> List[StationGroup]:
    """Legs grouped by occupied station, stations in order of first use."""
    groups: Dict[str, List[TraverseLeg]] = {}
    for leg in result.legs:
        groups.setdefault(leg.from_point.id, []).append(leg)
    out: List[StationGroup] = []
    for station_id, legs in groups.items():
        orientation, ref_info = _setup_orientation(result, station_id, legs)
        out.append(StationGroup(station_id, orientation, ref_info, legs))
    return out


def render_html_report(result: TraverseResult, title: str | None = None) -> str:
    """Render a :class:`TraverseResult` as a standalone HTML document."""
    if title is None:
        title = "Traverse Reduction Report"

    def esc(s: object) -> str:
        return html.escape(str(s))

    is_closed = result.traverse_type is TraverseType.CLOSED_LOOP

    css = """
    body { font-family: Arial, sans-serif; margin: 24px; }
    h1 { margin-bottom: 4px; }
    .meta { color: #555; margin-bottom: 16px; }
    table { border-collapse: collapse; width: 100%; margin: 12px 0 24px 0; }
    th, td { border: 1px solid #ddd; padding: 6px 8px; font-size: 13px; }
    th { background: #f5f5f5; text-align: left; }
    .fixed { font-weight: bold; }
    .side { color: #666; }
    .small { font-size: 12px; color: #666; }
    """

    parts: list[str] = []
    parts.append("<!doctype html>")
    parts.append("<html><head><meta charset='utf-8'>")
    parts.append(f"<title>{esc(title)}</title>")
    parts.append(f"<style>{css}</style>")
    parts.append("</head><body>")

    parts.append(f"<h1>{esc(title)}</h1>")
    parts.append(
        f"<div class='meta'>Type: {esc(result.traverse_type.value)} | "
        f"Legs: {len(result.chain_legs)} | Side shots: {len(result.side_shot_legs)} | "
        f"Start azimuth: {esc(decimal_to_dms(result.start_azimuth))} | "
        f"{esc(result.timestamp)}</div>"
    )

    parts.append("<h2>Closure</h2>")
    parts.append("<table><thead><tr><th>Total length (m)</th><th>Misclosure (m)</th><th>Azimuth</th>"
                 "<th>ΔE (m)</th><th>ΔN (m)</th><th>Precision</th></tr></thead><tbody>")
    parts.append(
        "<tr>"
        f"<td>{result.total_length:.3f}</td>"
        f"<td>{result.misclosure_dist:.4f}</td>"
        f"<td>{esc(decimal_to_dms(result.misclosure_azimuth))}</td>"
        f"<td>{result.delta_e:.4f}</td>"
        f"<td>{result.delta_n:.4f}</td>"
        f"<td>{esc(result.precision_ratio) if is_closed else '-'}</td>"
        "</tr>"
    )
    parts.append("</tbody></table>")

    parts.append("<h2>Station Observations</h2>")
    for group in group_legs_by_station(result):
        ref = f" ({esc(group.ref_info)})" if group.ref_info else ""
        parts.append(
            f"<h3>Station {esc(group.station_id)} | "
            f"Orientation: {esc(decimal_to_dms(group.orientation))}{ref}</h3>"
        )
        parts.append(
            "<table><thead><tr>"
            "<th>Target</th><th>Azimuth</th><th>Dist (m)</th><th>Lat</th><th>Dep</th>"
            "<th>Adj Lat</th><th>Adj Dep</th><th>E</th><th>N</th>"
            "</tr></thead><tbody>"
        )
        for leg in group.legs:
            cls = "side" if leg.is_side_shot else ""
            tag = " (SS)" if leg.is_side_shot else ""
            parts.append(
                f"<tr class='{cls}'>"
                f"<td>{esc(leg.to_point.id)}{tag}</td>"
                f"<td>{esc(decimal_to_dms(leg.calc_azimuth))}</td>"
                f"<td>{leg.distance:.3f}</td>"
                f"<td>{leg.calc_lat:.4f}</td><td>{leg.calc_dep:.4f}</td>"
                f"<td>{leg.adj_lat:.4f}</td><td>{leg.adj_dep:.4f}</td>"
                f"<td>{leg.adj_easting:.4f}</td><td>{leg.adj_northing:.4f}</td>"
                "</tr>"
            )
        parts.append("</tbody></table>")

    parts.append("<h2>Coordinate Register</h2>")
    parts.append("<table><thead><tr><th>ID</th><th>E</th><th>N</th><th>Description</th><th>Status</th></tr></thead><tbody>")
    for p in result.sorted_points():
        status = "FIXED" if p.is_held else "ADJUSTED"
        cls = "fixed" if p.is_held else ""
        parts.append(
            f"<tr class='{cls}'>"
            f"<td>{esc(p.id)}</td>"
            f"<td>{p.easting:.4f}</td><td>{p.northing:.4f}</td>"
            f"<td>{esc(p.description)}</td><td>{status}</td>"
            "</tr>"
        )
    parts.append("</tbody></table>")

    if result.messages:
        parts.append("<h2>Messages</h2><ul>")
        for m in result.messages:
            parts.append(f"<li>{esc(m)}</li>")
        parts.append("</ul>")

    parts.append("<div class='small'>Generated by Traverse Reduction core engine</div>")
    parts.append("</body></html>")
    return "\n".join(parts)


def save_html_report(path: str, result: TraverseResult, title: str | None = None) -> None:
    """Write an HTML report to disk."""
    html_str = render_html_report(result, title=title)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html_str)
