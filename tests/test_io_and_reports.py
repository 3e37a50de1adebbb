"""
Tests for point CSV, project storage, HTML report and assessment prompt.
"""

import csv
import json
from html import escape
from pathlib import Path

import pytest

from traverse_reduction.core.geometry import decimal_to_dms, inverse_azimuth
from traverse_reduction.core.models.fieldbook import FieldBook
from traverse_reduction.core.models.observation import Observation
from traverse_reduction.core.models.options import TraverseType
from traverse_reduction.core.models.point import Point
from traverse_reduction.core.reports import (
    SYSTEM_INSTRUCTION,
    assessment_summary,
    build_assessment_prompt,
    field_decision,
    group_legs_by_station,
    render_html_report,
    save_html_report,
)
from traverse_reduction.core.solver import reduce_field_book, reduce_traverse
from traverse_reduction.io import (
    DEFAULT_FOLDER,
    Project,
    ProjectStore,
    load_project,
    parse_points_csv,
    project_points,
    save_project,
    write_points_csv,
)


DATA_DIR = Path(__file__).parent / "data"


def _square_result(traverse_type=TraverseType.CLOSED_LOOP, extra=()):
    start = Point(id="STN1", easting=1000.0, northing=5000.0, is_control=True, fixed=True)
    obs = [
        Observation(id="1", from_point_id="STN1", to_point_id="STN2", horizontal_angle=90.0,
                    horizontal_distance=100.0, is_traverse_leg=True),
        Observation(id="2", from_point_id="STN2", to_point_id="STN10", horizontal_angle=0.0,
                    horizontal_distance=100.0, is_traverse_leg=True),
        Observation(id="3", from_point_id="STN10", to_point_id="STN1", horizontal_angle=225.0,
                    horizontal_distance=141.42, is_traverse_leg=True),
        Observation(id="4", from_point_id="STN2", to_point_id="TREE<1>", horizontal_angle=45.0,
                    horizontal_distance=10.0),
    ]
    return reduce_traverse(start, 0.0, obs + list(extra), traverse_type)


def _book():
    with (DATA_DIR / "example_project.json").open(encoding="utf-8") as f:
        return FieldBook.from_dict(json.load(f)["data"])


class TestPointsCsv:
    def test_parse_skips_bad_rows(self):
        points = parse_points_csv(DATA_DIR / "example_points.csv")
        assert [p.id for p in points] == ["STN1", "BM1", "CP10"]
        assert points[1].easting == 500250.0
        assert all(p.is_control and p.fixed for p in points)

    def test_project_points_control_wins(self):
        result = _square_result()
        control = [Point(id="STN2", easting=1.0, northing=2.0, is_control=True, fixed=True)]
        merged = project_points(control, result)
        by_id = {p.id: p for p in merged}
        assert by_id["STN2"].easting == 1.0
        assert "TREE<1>" in by_id

    def test_project_points_natural_order(self):
        merged = project_points([], _square_result())
        assert [p.id for p in merged] == ["STN1", "STN2", "STN10", "TREE<1>"]

    def test_project_points_without_result(self):
        control = [Point(id="B", easting=0, northing=0), Point(id="A", easting=0, northing=0)]
        assert [p.id for p in project_points(control)] == ["A", "B"]

    def test_write_csv(self, tmp_path):
        out = tmp_path / "points.csv"
        count = write_points_csv(out, project_points([], _square_result()))
        assert count == 4
        with out.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["ID", "Easting", "Northing", "Elevation", "Description", "Type"]
        assert rows[1] == ["STN1", "1000.0000", "5000.0000", "", "", "FIXED"]
        assert rows[2][0] == "STN2"
        assert rows[2][-1] == "ADJUSTED"

    def test_exported_csv_imports(self, tmp_path):
        out = tmp_path / "points.csv"
        write_points_csv(out, project_points([], _square_result()))
        assert len(parse_points_csv(out)) == 4


class TestProjects:
    def test_load_example(self):
        project = load_project(DATA_DIR / "example_project.json")
        assert project.name == "Site Boundary"
        assert project.folder == "Client A"
        assert project.last_modified == 1718000000000
        assert project.field_book.start_point.id == "STN1"

    def test_save_and_load(self, tmp_path):
        project = Project(id="p1", name="Test", field_book=_book())
        path = tmp_path / "p1.json"
        save_project(path, project)
        loaded = load_project(path)
        assert loaded == project

    def test_defaults(self):
        project = Project(id="", name="New", field_book=_book(), folder="")
        assert project.id.isdigit()
        assert project.folder == DEFAULT_FOLDER

    def test_record_without_data_raises(self):
        with pytest.raises(ValueError):
            Project.from_dict({"id": "1", "name": "x"})

    def test_store_crud(self, tmp_path):
        store = ProjectStore(tmp_path / "store" / "projects.json")
        assert store.list() == []
        assert store.folders() == [DEFAULT_FOLDER]

        store.save(Project(id="a", name="Alpha", field_book=_book()))
        store.save(Project(id="b", name="Beta", field_book=_book(), folder="Client A"))
        assert [p.id for p in store.list()] == ["a", "b"]
        assert [p.id for p in store.list(folder="Client A")] == ["b"]
        assert store.folders() == ["Client A", DEFAULT_FOLDER]

        saved = store.save(Project(id="a", name="Alpha v2", field_book=_book()))
        assert saved.last_modified > 0
        assert store.get("a").name == "Alpha v2"
        assert len(store.list()) == 2

        store.delete("a")
        assert [p.id for p in store.list()] == ["b"]

    def test_store_missing_project(self, tmp_path):
        store = ProjectStore(tmp_path / "projects.json")
        with pytest.raises(KeyError):
            store.get("nope")
        with pytest.raises(KeyError):
            store.delete("nope")

    def test_store_rejects_non_list(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError):
            ProjectStore(path).list()


class TestHtmlReport:
    def test_sections(self):
        html = render_html_report(_square_result())
        assert "<title>Traverse Reduction Report</title>" in html
        assert "<h2>Closure</h2>" in html
        assert "<h3>Station STN1 | " in html
        assert "<h3>Station STN2 | " in html
        assert "(SS)" in html
        assert "<h2>Coordinate Register</h2>" in html
        assert "FIXED" in html

    def test_ids_escaped(self):
        html = render_html_report(_square_result())
        assert "TREE&lt;1&gt;" in html
        assert "TREE<1>" not in html

    def test_messages_listed(self):
        orphan = Observation(id="9", from_point_id="GHOST", to_point_id="X",
                             horizontal_angle=0.0, horizontal_distance=1.0)
        html = render_html_report(_square_result(extra=[orphan]))
        assert "<h2>Messages</h2>" in html
        assert "GHOST" in html

    def test_open_has_no_precision(self):
        html = render_html_report(_square_result(TraverseType.OPEN), title="Open run")
        assert "<title>Open run</title>" in html
        assert "<td>-</td>" in html

    def test_group_legs_by_station(self):
        groups = group_legs_by_station(_square_result())
        assert [g.station_id for g in groups] == ["STN1", "STN2", "STN10"]
        assert [leg.to_point.id for leg in groups[1].legs] == ["STN10", "TREE<1>"]

    def test_save(self, tmp_path):
        out = tmp_path / "report.html"
        save_html_report(str(out), _square_result(), title="Saved")
        assert out.read_text(encoding="utf-8").startswith("<!doctype html>")


class TestStationOrientation:
    """Circle orientation of each setup."""

    def test_start_station_uses_start_azimuth(self):
        start = Point(id="STN1", easting=0.0, northing=0.0, fixed=True)
        obs = [Observation(id="1", from_point_id="STN1", to_point_id="P", horizontal_angle=10.0,
                           horizontal_distance=5.0, is_traverse_leg=True)]
        res = reduce_traverse(start, 45.5, obs, "OPEN")
        group = group_legs_by_station(res)[0]
        assert group.orientation == 45.5
        assert group.ref_info == "Start Az Input"

    def test_propagated_without_backsight(self):
        groups = {g.station_id: g for g in group_legs_by_station(_square_result())}
        assert groups["STN2"].orientation == pytest.approx(270.0)
        assert groups["STN2"].ref_info == "BS: STN1 (Prop)"
        assert groups["STN10"].orientation == pytest.approx(180.0)
        assert groups["STN10"].ref_info == "BS: STN2 (Prop)"

    def test_computed_from_observed_backsight(self):
        backsight = Observation(id="bs", from_point_id="STN2", to_point_id="STN1",
                                horizontal_angle=270.0, horizontal_distance=100.0)
        res = _square_result(extra=[backsight])
        groups = {g.station_id: g for g in group_legs_by_station(res)}
        stn2 = res.adjusted_points["STN2"]
        stn1 = res.adjusted_points["STN1"]
        back_bearing = inverse_azimuth(stn2.easting, stn2.northing, stn1.easting, stn1.northing)
        expected = (back_bearing - 270.0) % 360.0
        assert groups["STN2"].ref_info == "BS: STN1 (Comp)"
        assert groups["STN2"].orientation == pytest.approx(expected, abs=1e-9)

    def test_report_shows_orientation(self):
        html = render_html_report(reduce_field_book(_book()))
        assert f"<h3>Station STN1 | Orientation: {escape(decimal_to_dms(0.0))} (Start Az Input)</h3>" in html
        assert f"<h3>Station STN2 | Orientation: {escape(decimal_to_dms(270.0))} (BS: STN1 (Prop))</h3>" in html


class TestAssessment:
    def test_summary_rounding(self):
        summary = assessment_summary(_square_result())
        assert summary["traverse_type"] == "CLOSED_LOOP"
        assert summary["total_length"] == 341.42
        assert isinstance(summary["precision"], int)

    def test_decision(self):
        result = _square_result()
        result.precision = 12000.0
        assert field_decision(result) == "ACCEPT"
        result.precision = 4000.0
        assert field_decision(result) == "REJECT"
        assert field_decision(result, threshold=3000.0) == "ACCEPT"

    def test_open_unchecked(self):
        assert field_decision(_square_result(TraverseType.OPEN)) == "UNCHECKED"

    def test_prompt_contents(self):
        result = _square_result()
        prompt = build_assessment_prompt(result, notes="windy, 30C")
        assert "Traverse Type: CLOSED_LOOP" in prompt
        assert f"Misclosure Distance: {result.misclosure_dist:.4f} m" in prompt
        assert f"Relative Precision: 1:{round(result.precision)}" in prompt
        assert 'User Field Notes: "windy, 30C"' in prompt
        assert "Field Decision" in prompt

    def test_system_instruction(self):
        assert "1:10,000" in SYSTEM_INSTRUCTION
