from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from versync.core.config import ReleaseConfig
from versync.core.result import Err, Ok
from versync.git import repository as repository_mod
from versync.output.console import MockConsole
from versync.platform.process import ProcessError
from versync.services.release import ReleaseTransaction
from versync.services.release.errors import (
    ManifestNotFound,
    MissingDescriptor,
    RepositoryOperationFailed,
)
from versync.services.release.version import VersionId

PLUGIN_XML = """<?xml version='1.0' encoding='utf-8'?>
<plugin xmlns="http://apache.org/cordova/ns/plugins/1.0" id="cordova-plugin-x" version="{version}">
  <name>X</name>
</plugin>
"""


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def _make_project(
    root: Path,
    *,
    version: str = "1.0.0",
    manifest_version: str = "1.0.0",
    lock: bool = True,
    manifest: bool = True,
) -> None:
    _write_json(root / "package.json", {"name": "cordova-plugin-x", "version": version})
    if manifest:
        (root / "plugin.xml").write_text(PLUGIN_XML.format(version=manifest_version), encoding="utf-8")
    if lock:
        _write_json(root / "package-lock.json", {"name": "cordova-plugin-x", "version": version})


def _install_fake_git(
    monkeypatch: pytest.MonkeyPatch, *, fail_step: str | None = None
) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path, *, timeout: float | None = None):
        del cwd, timeout
        calls.append(cmd)
        if cmd[1] == fail_step:
            return Err(ProcessError(tuple(cmd), 1, "", "! [rejected] master -> master (fetch first)\n"))
        return Ok("")

    monkeypatch.setattr(repository_mod, "run_process", fake_run)
    return calls


def _read_version(path: Path) -> str:
    return json.loads(path.read_text(encoding="utf-8"))["version"]


class TestReleaseRun:
    def test_release_syncs_manifest_and_tags(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_project(tmp_path, version="1.0.1", manifest_version="1.0.0")
        lock_before = (tmp_path / "package-lock.json").read_bytes()
        calls = _install_fake_git(monkeypatch)
        console = MockConsole()

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=console).run()

        assert isinstance(result, Ok)
        outcome = result.value
        assert outcome.version == VersionId(1, 0, 1)
        assert outcome.prerelease is False
        assert outcome.written == (tmp_path / "plugin.xml",)
        assert 'version="1.0.1"' in (tmp_path / "plugin.xml").read_text(encoding="utf-8")
        assert (tmp_path / "package-lock.json").read_bytes() == lock_before
        assert calls == [
            ["git", "status", "-s"],
            ["git", "add", "."],
            ["git", "commit", "-S", "-m", ":bookmark: Release bump version: 1.0.1"],
            ["git", "push", "origin", "master"],
            ["git", "tag", "1.0.1"],
            ["git", "push", "--tags"],
        ]
        assert console.steps("plugin.xml") == ["Updating version to: 1.0.1"]

    def test_dev_bump_syncs_every_file_without_tag(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_project(tmp_path, version="1.0.1", manifest_version="1.0.1")
        calls = _install_fake_git(monkeypatch)

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=MockConsole()).run(
            prerelease=True
        )

        assert isinstance(result, Ok)
        assert str(result.value.version) == "1.0.1-dev"
        assert result.value.written == (
            tmp_path / "plugin.xml",
            tmp_path / "package.json",
            tmp_path / "package-lock.json",
        )
        assert _read_version(tmp_path / "package.json") == "1.0.1-dev"
        assert _read_version(tmp_path / "package-lock.json") == "1.0.1-dev"
        assert 'version="1.0.1-dev"' in (tmp_path / "plugin.xml").read_text(encoding="utf-8")
        assert [cmd[1] for cmd in calls] == ["status", "add", "commit", "push"]
        assert calls[2][-1] == "Set -dev suffix"

    def test_dev_bump_is_idempotent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _make_project(tmp_path, version="1.0.1-dev", manifest_version="1.0.1-dev")
        _install_fake_git(monkeypatch)

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=MockConsole()).run(
            prerelease=True
        )

        assert isinstance(result, Ok)
        assert str(result.value.version) == "1.0.1-dev"
        assert _read_version(tmp_path / "package.json") == "1.0.1-dev"

    def test_missing_manifest_runs_no_git(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_project(tmp_path, manifest=False)
        calls = _install_fake_git(monkeypatch)

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=MockConsole()).run(
            prerelease=True
        )

        assert result == Err(ManifestNotFound(path=tmp_path / "plugin.xml"))
        assert calls == []
        assert _read_version(tmp_path / "package.json") == "1.0.0"
        assert _read_version(tmp_path / "package-lock.json") == "1.0.0"

    def test_missing_descriptor(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _install_fake_git(monkeypatch)

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=MockConsole()).run()

        assert isinstance(result, Err)
        assert isinstance(result.error, MissingDescriptor)
        assert calls == []

    def test_git_failure_keeps_written_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_project(tmp_path, version="2.0.0", manifest_version="1.0.0")
        calls = _install_fake_git(monkeypatch, fail_step="push")

        result = ReleaseTransaction(ReleaseConfig(root=tmp_path), console=MockConsole()).run()

        assert isinstance(result, Err)
        assert isinstance(result.error, RepositoryOperationFailed)
        assert result.error.step == "push"
        assert [cmd[1] for cmd in calls] == ["status", "add", "commit", "push"]
        assert 'version="2.0.0"' in (tmp_path / "plugin.xml").read_text(encoding="utf-8")

    def test_dry_run_touches_nothing(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_project(tmp_path, version="1.0.1", manifest_version="1.0.0")
        before = {p.name: p.read_bytes() for p in tmp_path.iterdir()}
        calls = _install_fake_git(monkeypatch)

        result = ReleaseTransaction(
            ReleaseConfig(root=tmp_path), console=MockConsole(), dry_run=True
        ).run(prerelease=True)

        assert isinstance(result, Ok)
        assert result.value.dry_run is True
        assert result.value.operations == ()
        assert tmp_path / "plugin.xml" in result.value.written
        assert calls == []
        assert {p.name: p.read_bytes() for p in tmp_path.iterdir()} == before


def test_plan_lists_steps(tmp_path: Path) -> None:
    _make_project(tmp_path, version="3.1.0")
    config = ReleaseConfig(root=tmp_path, tag_prefix="v", sign=False)

    result = ReleaseTransaction(config, console=MockConsole()).plan()

    assert isinstance(result, Ok)
    assert [op.display() for op in result.value] == [
        "git status -s",
        "git add .",
        "git commit -m ':bookmark: Release bump version: 3.1.0'",
        "git push origin master",
        "git tag v3.1.0",
        "git push --tags",
    ]


def _git(cwd: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_release_against_real_repository(tmp_path: Path) -> None:
    remote = tmp_path / "remote.git"
    work = tmp_path / "work"
    work.mkdir()
    _git(tmp_path, "init", "--bare", str(remote))
    _git(work, "init")
    _git(work, "symbolic-ref", "HEAD", "refs/heads/master")
    _git(work, "config", "user.name", "Release Bot")
    _git(work, "config", "user.email", "release@example.com")
    _git(work, "config", "commit.gpgsign", "false")
    _git(work, "config", "tag.gpgsign", "false")
    _git(work, "remote", "add", "origin", str(remote))

    _make_project(work, version="1.0.0", manifest_version="0.9.0")
    _git(work, "add", ".")
    _git(work, "commit", "-m", "initial")

    config = ReleaseConfig(root=work, sign=False)
    result = ReleaseTransaction(config, console=MockConsole()).run()

    assert isinstance(result, Ok)
    assert _git(work, "status", "-s") == ""
    assert _git(remote, "tag", "--list").split() == ["1.0.0"]
    assert _git(remote, "log", "-1", "--format=%s", "master").strip() == (
        ":bookmark: Release bump version: 1.0.0"
    )
