"""Command line interface: reduce saved projects, convert angles."""

import math
from pathlib import Path
from typing import Optional

import typer

from traverse_reduction import __version__
from traverse_reduction.core.geometry.angles import decimal_to_dms, parse_angle
from traverse_reduction.core.models.options import ReductionOptions
from traverse_reduction.core.reports.assessment import build_assessment_prompt, field_decision
from traverse_reduction.core.reports.html_report import save_html_report
from traverse_reduction.core.solver.field_book import reduce_field_book
from traverse_reduction.io.points import project_points, write_points_csv
from traverse_reduction.io.projects import ProjectStore, load_project

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main() -> None:
    """traverse-reduction: compass rule traverse reduction tools."""
    pass


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(f"traverse-reduction {__version__}")


@app.command()
def reduce(
    project_file: Path = typer.Argument(..., exists=True, readable=True, help="Project JSON file (single project, or a project list with --project-id)."),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project to reduce from a project list file."),
    angle_mode: str = typer.Option("azimuth", "--angle-mode", help="Angle interpretation: [azimuth|turned]"),
    output_html: Optional[Path] = typer.Option(None, "--html", help="Output HTML report."),
    output_csv: Optional[Path] = typer.Option(None, "--csv", help="Output CSV with project points."),
    output_json: Optional[Path] = typer.Option(None, "--json", help="Output JSON with the full result."),
    show_prompt: bool = typer.Option(False, "--prompt", help="Print the accuracy assessment prompt."),
    notes: str = typer.Option("", "--notes", help="Field notes for the assessment prompt."),
) -> None:
    """
    Reduces the field book of a saved project and reports the closure.
    """
    try:
        options = ReductionOptions(angle_mode=angle_mode)
        if project_id is not None:
            project = ProjectStore(project_file).get(project_id)
        else:
            project = load_project(project_file)
    except (KeyError, TypeError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    book = project.field_book
    result = reduce_field_book(book, options)
    if result is None:
        typer.echo("Error: the field book has no complete observations.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Project: {project.name} ({result.traverse_type.value})")
    typer.echo(f"Legs: {len(result.chain_legs)}  Side shots: {len(result.side_shot_legs)}")
    typer.echo(f"Total length: {result.total_length:.3f} m")
    typer.echo(f"Misclosure: {result.misclosure_dist:.4f} m @ {decimal_to_dms(result.misclosure_azimuth)}")
    typer.echo(f"dE: {result.delta_e:.4f}  dN: {result.delta_n:.4f}")
    typer.echo(f"Precision: {result.precision_ratio}")
    typer.echo(f"Decision: {field_decision(result, options.accept_precision)}")
    for message in result.messages:
        typer.echo(f"Warning: {message}", err=True)

    if output_html:
        save_html_report(str(output_html), result, title=f"Traverse Reduction - {project.name}")
        typer.echo(f"HTML report written to {output_html}")
    if output_csv:
        count = write_points_csv(output_csv, project_points(book.control_points(), result))
        typer.echo(f"{count} points written to {output_csv}")
    if output_json:
        output_json.write_text(result.to_json(), encoding="utf-8")
        typer.echo(f"Result written to {output_json}")
    if show_prompt:
        typer.echo(build_assessment_prompt(result, notes))


@app.command()
def dms(degrees: float = typer.Argument(..., help="Decimal degrees.")) -> None:
    """Format decimal degrees as D°MM'SS"."""
    typer.echo(decimal_to_dms(degrees))


@app.command("parse-angle")
def parse_angle_cmd(text: str = typer.Argument(..., help="Angle text, DMS or decimal degrees.")) -> None:
    """Parse angle text to decimal degrees."""
    value = parse_angle(text)
    if math.isnan(value):
        typer.echo(f"Error: cannot parse angle {text!r}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{value:.6f}")


if __name__ == "__main__":
    app()
