"""
Tests for the command line interface.
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from traverse_reduction import __version__
from traverse_reduction.cli import app
from traverse_reduction.io import Project, ProjectStore, load_project


DATA_DIR = Path(__file__).parent / "data"
EXAMPLE = DATA_DIR / "example_project.json"

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_reduce_summary():
    result = runner.invoke(app, ["reduce", str(EXAMPLE)])
    assert result.exit_code == 0, result.output
    assert "Project: Site Boundary (CLOSED_LOOP)" in result.output
    assert "Legs: 4  Side shots: 1" in result.output
    assert "Total length: 746.370 m" in result.output
    assert "Decision: REJECT" in result.output


def test_reduce_writes_outputs(tmp_path):
    html = tmp_path / "report.html"
    points = tmp_path / "points.csv"
    out_json = tmp_path / "result.json"
    result = runner.invoke(app, [
        "reduce", str(EXAMPLE),
        "--html", str(html),
        "--csv", str(points),
        "--json", str(out_json),
    ])
    assert result.exit_code == 0, result.output
    assert "<h2>Closure</h2>" in html.read_text(encoding="utf-8")
    lines = points.read_text(encoding="utf-8").splitlines()
    # header + STN1..STN4 + BM1 + TREE1
    assert len(lines) == 7
    assert json.loads(out_json.read_text(encoding="utf-8"))["metadata"]["traverse_type"] == "CLOSED_LOOP"


def test_reduce_prompt():
    result = runner.invoke(app, ["reduce", str(EXAMPLE), "--prompt", "--notes", "hot day"])
    assert result.exit_code == 0
    assert 'User Field Notes: "hot day"' in result.output


def test_reduce_turned_mode():
    result = runner.invoke(app, ["reduce", str(EXAMPLE), "--angle-mode", "turned"])
    assert result.exit_code == 0
    assert "Legs: 4" in result.output


def test_reduce_bad_angle_mode():
    result = runner.invoke(app, ["reduce", str(EXAMPLE), "--angle-mode", "bearing"])
    assert result.exit_code == 1


def test_reduce_from_store(tmp_path):
    store_path = tmp_path / "projects.json"
    store = ProjectStore(store_path)
    project = load_project(EXAMPLE)
    store.save(Project(id="42", name="Stored", field_book=project.field_book))

    result = runner.invoke(app, ["reduce", str(store_path), "--project-id", "42"])
    assert result.exit_code == 0, result.output
    assert "Project: Stored" in result.output

    missing = runner.invoke(app, ["reduce", str(store_path), "--project-id", "7"])
    assert missing.exit_code == 1


def test_reduce_empty_field_book(tmp_path):
    data = json.loads(EXAMPLE.read_text(encoding="utf-8"))
    data["data"]["setups"] = []
    path = tmp_path / "empty.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    result = runner.invoke(app, ["reduce", str(path)])
    assert result.exit_code == 1


def test_reduce_missing_file(tmp_path):
    result = runner.invoke(app, ["reduce", str(tmp_path / "nope.json")])
    assert result.exit_code != 0


def test_reduce_reports_dropped_side_shot(tmp_path):
    data = json.loads(EXAMPLE.read_text(encoding="utf-8"))
    data["data"]["setups"].append({
        "id": "s9",
        "stationId": "GHOST",
        "observations": [
            {"id": "9", "targetId": "X", "angleStr": "10", "distStr": "5", "isTraverseLeg": False},
        ],
    })
    path = tmp_path / "ghost.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    result = runner.invoke(app, ["reduce", str(path)])
    assert result.exit_code == 0
    assert "Warning: Side shot 9" in result.output


def test_reduce_null_coordinate(tmp_path):
    data = json.loads(EXAMPLE.read_text(encoding="utf-8"))
    data["data"]["startPoint"]["easting"] = None
    path = tmp_path / "null.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    result = runner.invoke(app, ["reduce", str(path)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, TypeError)
    assert "Error: Point 'STN1' has no easting" in result.output


def test_reduce_malformed_control_point(tmp_path):
    data = json.loads(EXAMPLE.read_text(encoding="utf-8"))
    data["data"]["extraControlPoints"][0]["northing"] = [1, 2]
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    result = runner.invoke(app, ["reduce", str(path)])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_dms():
    result = runner.invoke(app, ["dms", "90.5"])
    assert result.exit_code == 0
    assert result.output.strip() == "90°30'00\""


def test_parse_angle():
    result = runner.invoke(app, ["parse-angle", "120 30 15"])
    assert result.exit_code == 0
    assert result.output.strip() == "120.504167"


def test_parse_angle_invalid():
    result = runner.invoke(app, ["parse-angle", "12 75 00"])
    assert result.exit_code == 1
