"""Project persistence.

A project is a named, foldered field book. Projects are kept in a single
JSON file holding a list of project records, the same layout the field
application keeps in browser storage, so exported files load in both.
Records written by the field application (camelCase keys) are accepted.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.models.fieldbook import FieldBook


DEFAULT_FOLDER = "Default"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Project:
    """
    A saved field book.

    Attributes:
        id: Project identifier (epoch milliseconds at creation by default)
        name: Display name
        folder: Folder the project is filed under
        last_modified: Epoch milliseconds of the last save
        field_book: The project data
    """

    id: str
    name: str
    field_book: FieldBook
    folder: str = DEFAULT_FOLDER
    last_modified: int = 0

    def __post_init__(self):
        if not self.id:
            self.id = str(_now_ms())
        if not self.folder:
            self.folder = DEFAULT_FOLDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "folder": self.folder,
            "last_modified": self.last_modified,
            "data": self.field_book.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        if "data" not in data:
            raise ValueError("Project record has no 'data' section")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            folder=str(data.get("folder") or DEFAULT_FOLDER),
            last_modified=int(data.get("last_modified", data.get("lastModified", 0)) or 0),
            field_book=FieldBook.from_dict(data["data"]),
        )


def load_project(path: str | Path) -> Project:
    """Read a single project JSON file."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a project object")
    return Project.from_dict(data)


def save_project(path: str | Path, project: Project) -> None:
    """Write a single project JSON file."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(project.to_dict(), f, indent=2, ensure_ascii=False)


class ProjectStore:
    """JSON file holding a list of projects."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> List[Project]:
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"{self.path} does not contain a project list")
        return [Project.from_dict(item) for item in raw]

    def _write(self, projects: List[Project]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in projects], f, indent=2, ensure_ascii=False)

    def list(self, folder: Optional[str] = None) -> List[Project]:
        """All projects, optionally only those in one folder."""
        projects = self._read()
        if folder is not None:
            projects = [p for p in projects if p.folder == folder]
        return projects

    def get(self, project_id: str) -> Project:
        """
        Get a project by ID.

        Raises:
            KeyError: If the project does not exist
        """
        for p in self._read():
            if p.id == project_id:
                return p
        raise KeyError(f"Project '{project_id}' not found")

    def save(self, project: Project) -> Project:
        """Insert or replace a project (by ID) and stamp its modification time."""
        project.last_modified = _now_ms()
        projects = [p for p in self._read() if p.id != project.id]
        projects.append(project)
        self._write(projects)
        return project

    def delete(self, project_id: str) -> None:
        """
        Delete a project by ID.

        Raises:
            KeyError: If the project does not exist
        """
        projects = self._read()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            raise KeyError(f"Project '{project_id}' not found")
        self._write(remaining)

    def folders(self) -> List[str]:
        """Sorted folder names; always includes the default folder."""
        names = {DEFAULT_FOLDER}
        names.update(p.folder for p in self._read())
        return sorted(names)
