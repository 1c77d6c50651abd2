"""Project root detection.

The project root is the directory holding the package descriptor
(`package.json`). Every file versync touches and every git command it runs
is relative to it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result

__all__ = [
    "PROJECT_MARKER",
    "ProjectError",
    "ProjectRoot",
    "ProjectSource",
    "detect_project",
    "find_project_upward",
    "is_project_root",
]

PROJECT_MARKER = "package.json"

ProjectSource = Literal["option", "env", "cwd"]


@dataclass(frozen=True)
class ProjectError:
    """Error when the project root cannot be determined."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectRoot:
    path: Path
    source: ProjectSource

    def __str__(self) -> str:
        return str(self.path)


def is_project_root(path: Path) -> bool:
    return (path / PROJECT_MARKER).is_file()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start for a directory holding package.json."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project(
    *,
    explicit: Path | None = None,
    start_dir: Path | None = None,
    env_var: str = "VERSYNC_ROOT",
) -> Result[ProjectRoot, ProjectError]:
    """Resolve the project root.

    Detection order:
    1. Explicit path (the --root option); must be an existing directory
    2. VERSYNC_ROOT environment variable (if set and a directory)
    3. Search upward from start_dir (or cwd) for package.json
    """
    if explicit is not None:
        try:
            root = explicit.expanduser().resolve()
        except OSError as e:
            return Err(ProjectError(f"invalid project root: {e}", searched_from=explicit))
        if not root.is_dir():
            return Err(ProjectError(f"project root is not a directory: {root}", searched_from=root))
        return Ok(ProjectRoot(path=root, source="option"))

    env_value = os.environ.get(env_var)
    if env_value:
        root = Path(env_value).expanduser().resolve()
        if root.is_dir():
            return Ok(ProjectRoot(path=root, source="env"))

    start = (start_dir or Path.cwd()).resolve()
    found = find_project_upward(start)
    if found is None:
        return Err(
            ProjectError(
                f"no {PROJECT_MARKER} found in {start} or any parent directory",
                searched_from=start,
            )
        )
    return Ok(ProjectRoot(path=found, source="cwd"))
