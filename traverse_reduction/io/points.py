"""Point CSV import/export.

Import format is one point per line, ``ID, Easting, Northing`` with any
further columns ignored. Lines that do not parse (headers, blank lines,
notes) are skipped. Imported points are control points held fixed.

Export format::

    ID,Easting,Northing,Elevation,Description,Type

with coordinates to 4 decimals and Type ``FIXED`` or ``ADJUSTED``.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..core.models.point import Point
from ..core.results.traverse_result import TraverseResult, natural_key


EXPORT_HEADER = ["ID", "Easting", "Northing", "Elevation", "Description", "Type"]


def _parse_point_row(row: List[str]) -> Optional[Point]:
    cells = [c.strip() for c in row]
    if len(cells) < 3 or not cells[0]:
        return None
    try:
        e = float(cells[1])
        n = float(cells[2])
        return Point(id=cells[0], easting=e, northing=n, is_control=True, fixed=True)
    except ValueError:
        return None


def parse_points_csv(path: str | Path) -> List[Point]:
    """Parse control points from a CSV, in file order."""

    path = Path(path)
    points: List[Point] = []
    with path.open(newline="", encoding="utf-8") as f:
        for row in csv.reader(f):
            point = _parse_point_row(row)
            if point is not None:
                points.append(point)
    return points


def project_points(control_points: Iterable[Point], result: Optional[TraverseResult] = None) -> List[Point]:
    """Control points merged with computed points, in natural ID order.

    A control definition takes precedence over a computed point of the same ID.
    """
    merged: Dict[str, Point] = {}
    for p in control_points:
        merged[p.id] = p
    if result is not None:
        for p in result.adjusted_points.values():
            merged.setdefault(p.id, p)
    return sorted(merged.values(), key=lambda p: natural_key(p.id))


def write_points_csv(path: str | Path, points: Iterable[Point]) -> int:
    """Write points to CSV. Returns the number of rows written."""

    path = Path(path)
    count = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(EXPORT_HEADER)
        for p in points:
            writer.writerow([
                p.id,
                f"{p.easting:.4f}",
                f"{p.northing:.4f}",
                "" if p.elevation is None else p.elevation,
                p.description,
                "FIXED" if p.fixed else "ADJUSTED",
            ])
            count += 1
    return count
