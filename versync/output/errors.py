"""Error presentation utilities.

Centralized error formatting and exit code mapping for release errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from versync.core.errors import ErrorCode
from versync.output.console import Style
from versync.services.release.errors import (
    FileWriteFailed,
    InvalidVersion,
    LockFileInvalid,
    ManifestNotFound,
    ManifestParseError,
    ManifestSchemaError,
    MissingDescriptor,
    ReleaseError,
    RepositoryOperationFailed,
)

if TYPE_CHECKING:
    from versync.output.console import ConsoleProtocol

__all__ = ["format_release_error", "print_release_error", "release_error_exit_code"]


def format_release_error(error: ReleaseError) -> str:
    """One-line description of a release error."""
    match error:
        case MissingDescriptor(path=path, reason=reason):
            return f"cannot read package descriptor {path}: {reason}"
        case InvalidVersion(path=path, value=value):
            return f"invalid version {value!r} in {path} (expected MAJOR.MINOR.PATCH[-dev])"
        case ManifestNotFound(path=path):
            return f"missing manifest: {path}"
        case ManifestParseError(path=path, reason=reason, line=line, column=column):
            where = f":{line}:{column}" if line is not None else ""
            return f"malformed manifest {path}{where}: {reason}"
        case ManifestSchemaError(path=path, reason=reason):
            return f"unexpected manifest shape in {path}: {reason}"
        case LockFileInvalid(path=path, reason=reason):
            return f"invalid lock file {path}: {reason}"
        case FileWriteFailed(path=path, reason=reason):
            return f"failed to write {path}: {reason}"
        case RepositoryOperationFailed(step=step, command=command, returncode=rc):
            return f"git {step} failed (exit {rc}): {command}"


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error, with git's stderr as a hint when there is one."""
    console.error(format_release_error(error))
    match error:
        case RepositoryOperationFailed(stderr=stderr) if stderr:
            for line in stderr.splitlines():
                console.print(f"  {line}", Style.DIM)
            console.print("hint: files already written and completed git steps are kept", Style.DIM)
        case ManifestSchemaError():
            console.print("hint: nothing was written; fix the manifest and run again", Style.DIM)
        case _:
            pass


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error:
        case MissingDescriptor() | ManifestNotFound() | FileWriteFailed():
            return int(ErrorCode.IO_ERROR)
        case InvalidVersion() | ManifestParseError() | ManifestSchemaError() | LockFileInvalid():
            return int(ErrorCode.USER_ERROR)
        case RepositoryOperationFailed():
            return int(ErrorCode.GIT_ERROR)
