"""Git repository abstraction.

Each git step of a release is described by a GitOperation (name, argv,
working directory) and executed by Repository.execute, which blocks until
git exits. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.execute(status_operation(repo.path)):
        case Ok(output):
            for entry in parse_short_status(output):
                print(entry.pretty_xy(), entry.path)
        case Err(e):
            print(f"Error: {e.message}")

    op = commit_operation(repo.path, message="Set -dev suffix", sign=True)
    match repo.execute(op):
        case Ok(output):
            print(output)
        case Err(e):
            print(f"{e.command} failed: {e.message}")
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from versync.core.result import Err, Ok, Result
from versync.platform.process import run as run_process

__all__ = [
    "GitError",
    "GitOperation",
    "GitOperationName",
    "Repository",
    "StatusEntry",
    "add_operation",
    "commit_operation",
    "parse_short_status",
    "push_operation",
    "push_tags_operation",
    "status_operation",
    "tag_operation",
]

GitOperationName = Literal["status", "add", "commit", "push", "tag", "push_tags"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command line that failed
        message: Error message (git's stderr when it wrote one)
        returncode: Process return code (-1 if git could not be started)
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitOperation:
    """One git step: `git <args>` run in cwd."""

    name: GitOperationName
    args: tuple[str, ...]
    cwd: Path

    @property
    def argv(self) -> list[str]:
        return ["git", *self.args]

    def display(self) -> str:
        return shlex.join(self.argv)


def status_operation(cwd: Path) -> GitOperation:
    return GitOperation(name="status", args=("status", "-s"), cwd=cwd)


def add_operation(cwd: Path) -> GitOperation:
    return GitOperation(name="add", args=("add", "."), cwd=cwd)


def commit_operation(cwd: Path, *, message: str, sign: bool = True) -> GitOperation:
    args = ("commit", "-S", "-m", message) if sign else ("commit", "-m", message)
    return GitOperation(name="commit", args=args, cwd=cwd)


def push_operation(cwd: Path, *, remote: str, branch: str) -> GitOperation:
    return GitOperation(name="push", args=("push", remote, branch), cwd=cwd)


def tag_operation(cwd: Path, *, name: str) -> GitOperation:
    return GitOperation(name="tag", args=("tag", name), cwd=cwd)


def push_tags_operation(cwd: Path) -> GitOperation:
    return GitOperation(name="push_tags", args=("push", "--tags"), cwd=cwd)


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single line of `git status -s`.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    def pretty_xy(self) -> str:
        """Format XY with dots for spaces (".M" instead of " M")."""
        return self.xy.replace(" ", ".")


def parse_short_status(output: str) -> tuple[StatusEntry, ...]:
    """Parse `git status -s` output into entries."""
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        if line.startswith("?? "):
            entries.append(StatusEntry(xy="??", path=line[3:]))
            continue
        entries.append(StatusEntry(xy=line[:2], path=line[3:]))
    return tuple(entries)


class Repository:
    """Git working directory that release steps run against.

    Attributes:
        path: Path to the repository root
        timeout: Seconds before a git command is abandoned (None waits forever)
    """

    def __init__(self, path: Path, *, timeout: float | None = None) -> None:
        self.path = path
        self.timeout = timeout

    def execute(self, operation: GitOperation) -> Result[str, GitError]:
        """Run one operation and wait for git to exit.

        Returns:
            Ok(stdout) on success
            Err(GitError) on non-zero exit, timeout, or when git cannot start
        """
        result = run_process(operation.argv, cwd=operation.cwd, timeout=self.timeout)
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=operation.display(),
                        message=e.stderr.strip() or e.stdout.strip() or f"git {operation.name} failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout)
