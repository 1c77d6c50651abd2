"""Plan command - list the git steps a run would execute."""

from __future__ import annotations

from pathlib import Path

from versync.cli.commands._helpers import (
    branch_option,
    dev_option,
    exit_on_error,
    no_sign_option,
    publish_overrides,
    remote_option,
    root_option,
    tag_prefix_option,
)
from versync.cli.context import build_context
from versync.services.release.service import ReleaseTransaction


def plan(
    dev: bool = dev_option(),
    root: Path | None = root_option(),
    branch: str | None = branch_option(),
    remote: str | None = remote_option(),
    tag_prefix: str | None = tag_prefix_option(),
    no_sign: bool = no_sign_option(),
) -> None:
    """Print the git commands a run would execute, without touching anything."""
    ctx = build_context(
        root=root,
        **publish_overrides(branch=branch, remote=remote, tag_prefix=tag_prefix, no_sign=no_sign),
    )

    transaction = ReleaseTransaction(ctx.config, console=ctx.console, dry_run=True)
    result = transaction.plan(prerelease=dev)
    operations = exit_on_error(result, ctx)

    ctx.console.header(f"git steps ({ctx.project})")
    for operation in operations:
        ctx.console.print(operation.display())
