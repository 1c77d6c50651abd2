from __future__ import annotations

from pathlib import Path

import pytest

from versync.core.config import ReleaseConfig
from versync.core.result import Err, Ok
from versync.git import repository as repository_mod
from versync.git.repository import Repository
from versync.output.console import MockConsole
from versync.platform.process import ProcessError
from versync.services.release.errors import RepositoryOperationFailed
from versync.services.release.publisher import describe, plan_operations, publish


def _install_fake_git(
    monkeypatch: pytest.MonkeyPatch,
    *,
    fail_on: list[str] | None = None,
    outputs: dict[str, str] | None = None,
) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path, *, timeout: float | None = None):
        del cwd, timeout
        calls.append(cmd)
        if fail_on is not None and cmd[1:] == fail_on:
            return Err(ProcessError(tuple(cmd), 128, "", "fatal: unable to sign commit\n"))
        return Ok((outputs or {}).get(cmd[1], ""))

    monkeypatch.setattr(repository_mod, "run_process", fake_run)
    return calls


class TestPlanOperations:
    def test_release_has_tag_steps(self, tmp_path: Path) -> None:
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.3")

        assert [op.name for op in ops] == ["status", "add", "commit", "push", "tag", "push_tags"]
        assert ops[2].argv == [
            "git",
            "commit",
            "-S",
            "-m",
            ":bookmark: Release bump version: 1.2.3",
        ]
        assert ops[3].argv == ["git", "push", "origin", "master"]
        assert ops[4].argv == ["git", "tag", "1.2.3"]
        assert all(op.cwd == tmp_path for op in ops)

    def test_dev_version_has_no_tag_steps(self, tmp_path: Path) -> None:
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.4-dev")

        assert [op.name for op in ops] == ["status", "add", "commit", "push"]
        assert ops[2].argv[-1] == "Set -dev suffix"

    def test_config_is_honoured(self, tmp_path: Path) -> None:
        config = ReleaseConfig(
            root=tmp_path, remote="upstream", branch="main", tag_prefix="v", sign=False
        )
        ops = plan_operations(config, "1.2.3")

        assert ops[2].argv == ["git", "commit", "-m", ":bookmark: Release bump version: 1.2.3"]
        assert ops[3].argv == ["git", "push", "upstream", "main"]
        assert ops[4].argv == ["git", "tag", "v1.2.3"]


def test_describe(tmp_path: Path) -> None:
    ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.3")
    assert [describe(op) for op in ops] == [
        "Files to be committed:",
        "Adding files to commit",
        "Committing: :bookmark: Release bump version: 1.2.3",
        "Pushing commit to master",
        "Creating new tag: 1.2.3",
        "Pushing tags",
    ]


class TestPublish:
    def test_release_runs_every_step_in_order(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = _install_fake_git(monkeypatch, outputs={"status": " M plugin.xml\n"})
        console = MockConsole()
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.3")

        result = publish(Repository(tmp_path), ops, console=console)

        assert result == Ok(ops)
        assert calls == [op.argv for op in ops]
        assert calls.count(["git", "tag", "1.2.3"]) == 1
        assert calls.count(["git", "push", "--tags"]) == 1
        assert console.find(".M plugin.xml")

    def test_dev_never_tags(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _install_fake_git(monkeypatch)
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.4-dev")

        result = publish(Repository(tmp_path), ops, console=MockConsole())

        assert isinstance(result, Ok)
        assert [cmd[1] for cmd in calls] == ["status", "add", "commit", "push"]

    def test_failure_stops_the_sequence(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = _install_fake_git(
            monkeypatch, fail_on=["commit", "-S", "-m", ":bookmark: Release bump version: 1.2.3"]
        )
        console = MockConsole()
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.3")

        result = publish(Repository(tmp_path), ops, console=console)

        assert result == Err(
            RepositoryOperationFailed(
                step="commit",
                command="git commit -S -m ':bookmark: Release bump version: 1.2.3'",
                returncode=128,
                stderr="fatal: unable to sign commit",
            )
        )
        assert [cmd[1] for cmd in calls] == ["status", "add", "commit"]
        assert "Pushing commit to master" not in console.steps("git")

    def test_dry_run_executes_nothing(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = _install_fake_git(monkeypatch)
        console = MockConsole()
        ops = plan_operations(ReleaseConfig(root=tmp_path), "1.2.3")

        result = publish(Repository(tmp_path), ops, console=console, dry_run=True)

        assert result == Ok(())
        assert calls == []
        assert len(console.steps("git")) == 6
        assert console.find("git push --tags")
