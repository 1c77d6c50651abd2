from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from versync.git.repository import GitOperationName


@dataclass(frozen=True, slots=True)
class MissingDescriptor:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    path: Path
    value: str


@dataclass(frozen=True, slots=True)
class ManifestNotFound:
    path: Path


@dataclass(frozen=True, slots=True)
class ManifestParseError:
    path: Path
    reason: str
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True, slots=True)
class ManifestSchemaError:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class LockFileInvalid:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class FileWriteFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class RepositoryOperationFailed:
    step: GitOperationName
    command: str
    returncode: int
    stderr: str


ReleaseError = (
    MissingDescriptor
    | InvalidVersion
    | ManifestNotFound
    | ManifestParseError
    | ManifestSchemaError
    | LockFileInvalid
    | FileWriteFailed
    | RepositoryOperationFailed
)
