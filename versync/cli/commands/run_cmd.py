"""Run command - synchronize version files and publish with git."""

from __future__ import annotations

from pathlib import Path

import typer

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


def run(
    dev: bool = dev_option(),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would change; write nothing, run no git command"
    ),
    root: Path | None = root_option(),
    branch: str | None = branch_option(),
    remote: str | None = remote_option(),
    tag_prefix: str | None = tag_prefix_option(),
    no_sign: bool = no_sign_option(),
) -> None:
    """Sync plugin.xml (and the lock file for dev bumps), then commit, push and tag."""
    ctx = build_context(
        root=root,
        **publish_overrides(branch=branch, remote=remote, tag_prefix=tag_prefix, no_sign=no_sign),
    )
    console = ctx.console

    transaction = ReleaseTransaction(ctx.config, console=console, dry_run=dry_run)
    result = transaction.run(prerelease=dev)
    outcome = exit_on_error(result, ctx)

    if outcome.dry_run:
        console.info(f"dry run for {outcome.version}: nothing written, no git command executed")
        return
    if outcome.prerelease:
        console.success(f"dev version {outcome.version} pushed to {ctx.config.branch}")
    else:
        console.success(f"released {outcome.version} as tag {ctx.config.tag_name(str(outcome.version))}")
