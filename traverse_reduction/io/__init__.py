"""File I/O for traverse reduction: point CSV and project JSON."""

from .points import parse_points_csv, write_points_csv, project_points
from .projects import DEFAULT_FOLDER, Project, ProjectStore, load_project, save_project

__all__ = [
    "parse_points_csv",
    "write_points_csv",
    "project_points",
    "DEFAULT_FOLDER",
    "Project",
    "ProjectStore",
    "load_project",
    "save_project",
]
