"""Repository publisher: the ordered git steps of a release.

    status -> add -> commit -> push [-> tag -> push --tags]

The tag steps only run for release versions, never for dev versions. Each
step waits for git to exit before the next one starts, and the first
failure ends the sequence; nothing is retried or rolled back.
"""

from __future__ import annotations

from collections.abc import Sequence

from versync.core.config import ReleaseConfig
from versync.core.result import Err, Ok, Result
from versync.git.repository import (
    GitOperation,
    Repository,
    add_operation,
    commit_operation,
    parse_short_status,
    push_operation,
    push_tags_operation,
    status_operation,
    tag_operation,
)
from versync.output.console import ConsoleProtocol, Style
from versync.services.release.errors import ReleaseError, RepositoryOperationFailed
from versync.services.release.version import is_prerelease


def plan_operations(config: ReleaseConfig, version: str) -> tuple[GitOperation, ...]:
    """Build the git steps for publishing version, in execution order."""
    root = config.root
    prerelease = is_prerelease(version)

    operations = [
        status_operation(root),
        add_operation(root),
        commit_operation(
            root,
            message=config.commit_message(version, prerelease=prerelease),
            sign=config.sign,
        ),
        push_operation(root, remote=config.remote, branch=config.branch),
    ]
    if not prerelease:
        operations.append(tag_operation(root, name=config.tag_name(version)))
        operations.append(push_tags_operation(root))
    return tuple(operations)


def describe(operation: GitOperation) -> str:
    match operation.name:
        case "status":
            return "Files to be committed:"
        case "add":
            return "Adding files to commit"
        case "commit":
            return f"Committing: {operation.args[-1]}"
        case "push":
            return f"Pushing commit to {operation.args[-1]}"
        case "tag":
            return f"Creating new tag: {operation.args[-1]}"
        case "push_tags":
            return "Pushing tags"


def _echo_output(operation: GitOperation, stdout: str, console: ConsoleProtocol) -> None:
    if operation.name == "status":
        entries = parse_short_status(stdout)
        if not entries:
            console.print("  (no pending changes)", Style.DIM)
        for entry in entries:
            console.print(f"  {entry.pretty_xy()} {entry.path}", Style.DIM)
        return

    for line in stdout.splitlines():
        if line.strip():
            console.print(f"  {line.rstrip()}", Style.DIM)


def publish(
    repo: Repository,
    operations: Sequence[GitOperation],
    *,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[tuple[GitOperation, ...], ReleaseError]:
    """Run operations one after another, stopping at the first failure.

    Returns:
        Ok(completed operations) when every step succeeded (empty in dry run)
        Err(RepositoryOperationFailed) naming the step that failed
    """
    completed: list[GitOperation] = []
    for operation in operations:
        console.step("git", describe(operation))
        if dry_run:
            console.print(f"  {operation.display()}", Style.DIM)
            continue

        result = repo.execute(operation)
        if isinstance(result, Err):
            e = result.error
            return Err(
                RepositoryOperationFailed(
                    step=operation.name,
                    command=e.command,
                    returncode=e.returncode,
                    stderr=e.message,
                )
            )
        _echo_output(operation, result.value, console)
        completed.append(operation)

    return Ok(tuple(completed))
