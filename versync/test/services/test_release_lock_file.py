from __future__ import annotations

import json
from pathlib import Path

from versync.core.result import Err, Ok
from versync.services.release.errors import LockFileInvalid
from versync.services.release.lock_file import read_lock_version, sync_lock_file


def _write_lock(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "package-lock.json"
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def test_dev_version_is_written(tmp_path: Path) -> None:
    path = _write_lock(tmp_path, {"name": "x", "version": "1.0.0", "lockfileVersion": 1})

    assert sync_lock_file(path, "1.0.1-dev") == Ok(True)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"name": "x", "version": "1.0.1-dev", "lockfileVersion": 1}
    assert read_lock_version(path) == Ok("1.0.1-dev")


def test_release_version_is_ignored(tmp_path: Path) -> None:
    path = _write_lock(tmp_path, {"name": "x", "version": "1.0.0"})
    before = path.read_bytes()

    assert sync_lock_file(path, "1.0.1") == Ok(False)
    assert path.read_bytes() == before


def test_absent_lock_file(tmp_path: Path) -> None:
    path = tmp_path / "package-lock.json"

    assert sync_lock_file(path, "1.0.1-dev") == Ok(False)
    assert read_lock_version(path) == Ok(None)
    assert not path.exists()


def test_root_package_entry_is_updated(tmp_path: Path) -> None:
    path = _write_lock(
        tmp_path,
        {
            "name": "x",
            "version": "1.0.0",
            "lockfileVersion": 2,
            "packages": {
                "": {"name": "x", "version": "1.0.0"},
                "node_modules/dep": {"version": "1.0.0"},
            },
        },
    )

    assert sync_lock_file(path, "1.0.1-dev") == Ok(True)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == "1.0.1-dev"
    assert data["packages"][""]["version"] == "1.0.1-dev"
    assert data["packages"]["node_modules/dep"]["version"] == "1.0.0"


def test_already_synced(tmp_path: Path) -> None:
    path = _write_lock(tmp_path, {"name": "x", "version": "1.0.1-dev"})
    assert sync_lock_file(path, "1.0.1-dev") == Ok(False)


def test_dry_run(tmp_path: Path) -> None:
    path = _write_lock(tmp_path, {"name": "x", "version": "1.0.0"})
    before = path.read_bytes()

    assert sync_lock_file(path, "1.0.1-dev", dry_run=True) == Ok(True)
    assert path.read_bytes() == before


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "package-lock.json"
    path.write_text("{", encoding="utf-8")

    result = sync_lock_file(path, "1.0.1-dev")

    assert isinstance(result, Err)
    assert isinstance(result.error, LockFileInvalid)
    assert path.read_text(encoding="utf-8") == "{"
