"""Version source: the package descriptor's version and the dev marker.

A version identifier is `MAJOR.MINOR.PATCH` optionally followed by the
literal `-dev` marker. The descriptor (package.json) is authoritative: the
package manager has already bumped it when a release run starts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path

from versync.core.result import Err, Ok, Result
from versync.core.structured import get_raw_str
from versync.platform.files import write_text_if_changed
from versync.services.release.errors import (
    FileWriteFailed,
    InvalidVersion,
    MissingDescriptor,
    ReleaseError,
)
from versync.services.release.json_file import dump_json, load_json_object

__all__ = [
    "DEV_SUFFIX",
    "VersionId",
    "is_prerelease",
    "parse_version",
    "read_version",
    "with_prerelease_suffix",
    "write_version",
]

DEV_SUFFIX = "-dev"

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(-dev)?$")


@dataclass(frozen=True, slots=True, order=True)
class VersionId:
    major: int
    minor: int
    patch: int
    dev: bool = False

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}{DEV_SUFFIX}" if self.dev else base


def parse_version(text: str) -> VersionId | None:
    m = _VERSION_RE.match(text)
    if m is None:
        return None
    return VersionId(int(m.group(1)), int(m.group(2)), int(m.group(3)), dev=m.group(4) is not None)


def with_prerelease_suffix(version: VersionId) -> VersionId:
    """Append the dev marker; a version that already carries it is returned unchanged."""
    if version.dev:
        return version
    return replace(version, dev=True)


def is_prerelease(version: VersionId | str) -> bool:
    return DEV_SUFFIX in str(version)


def read_version(path: Path) -> Result[VersionId, ReleaseError]:
    """Read the `version` field of the package descriptor.

    Returns:
        Ok(VersionId) on success
        Err(MissingDescriptor) when the file is absent, unreadable or has no version
        Err(InvalidVersion) when the version is not MAJOR.MINOR.PATCH[-dev]
    """
    loaded = load_json_object(path)
    if isinstance(loaded, Err):
        return Err(MissingDescriptor(path=path, reason=loaded.error))

    raw = get_raw_str(loaded.value.data, "version")
    if raw is None:
        return Err(MissingDescriptor(path=path, reason="missing version field"))

    version = parse_version(raw)
    if version is None:
        return Err(InvalidVersion(path=path, value=raw))
    return Ok(version)


def write_version(
    path: Path, version: VersionId, *, dry_run: bool = False
) -> Result[bool, ReleaseError]:
    """Rewrite the descriptor's `version` field.

    Returns Ok(True) when the file was rewritten (or would be, in dry run),
    Ok(False) when it already held this version.
    """
    loaded = load_json_object(path)
    if isinstance(loaded, Err):
        return Err(MissingDescriptor(path=path, reason=loaded.error))

    doc = loaded.value
    if get_raw_str(doc.data, "version") == str(version):
        return Ok(False)
    if dry_run:
        return Ok(True)

    doc.data["version"] = str(version)
    try:
        return Ok(write_text_if_changed(path, dump_json(doc.data), previous=doc.text))
    except OSError as e:
        return Err(FileWriteFailed(path=path, reason=str(e)))
