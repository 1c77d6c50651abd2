"""Lock file synchronizer.

The lock descriptor is optional. It is only rewritten on the dev path: for a
release the package manager's own bump has already updated it.
"""

from __future__ import annotations

from pathlib import Path

from versync.core.result import Err, Ok, Result
from versync.core.structured import StrDict, get_raw_str, get_table
from versync.platform.files import write_text_if_changed
from versync.services.release.errors import FileWriteFailed, LockFileInvalid, ReleaseError
from versync.services.release.json_file import dump_json, load_json_object
from versync.services.release.version import is_prerelease

# npm lockfileVersion >= 2 repeats the root package under packages[""].
_ROOT_PACKAGE_KEY = ""


def read_lock_version(path: Path) -> Result[str | None, ReleaseError]:
    """Version recorded in the lock file; Ok(None) when the file is absent."""
    if not path.is_file():
        return Ok(None)
    loaded = load_json_object(path)
    if isinstance(loaded, Err):
        return Err(LockFileInvalid(path=path, reason=loaded.error))
    return Ok(get_raw_str(loaded.value.data, "version"))


def _set_versions(data: StrDict, version: str) -> None:
    data["version"] = version
    packages = get_table(data, "packages")
    if packages is None:
        return
    root_package = get_table(packages, _ROOT_PACKAGE_KEY)
    if root_package is not None and "version" in root_package:
        root_package["version"] = version


def sync_lock_file(path: Path, version: str, *, dry_run: bool = False) -> Result[bool, ReleaseError]:
    """Mirror a dev version into the lock file.

    Returns:
        Ok(False) when the file is absent, the version is not a pre-release,
            or the file already matches
        Ok(True) when the file was rewritten (or would be, in dry run)
        Err(LockFileInvalid | FileWriteFailed)
    """
    if not path.is_file():
        return Ok(False)
    if not is_prerelease(version):
        return Ok(False)

    loaded = load_json_object(path)
    if isinstance(loaded, Err):
        return Err(LockFileInvalid(path=path, reason=loaded.error))

    doc = loaded.value
    _set_versions(doc.data, version)
    rendered = dump_json(doc.data)
    if rendered == doc.text:
        return Ok(False)
    if dry_run:
        return Ok(True)

    try:
        return Ok(write_text_if_changed(path, rendered, previous=doc.text))
    except OSError as e:
        return Err(FileWriteFailed(path=path, reason=str(e)))
