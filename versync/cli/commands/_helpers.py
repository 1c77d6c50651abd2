"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

import typer

from versync.core.result import Err, Ok, Result
from versync.output.errors import print_release_error, release_error_exit_code
from versync.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from versync.cli.context import CLIContext

T = TypeVar("T")


def exit_on_error(result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its mapped code."""
    match result:
        case Err(e):
            print_release_error(e, ctx.console)
            raise typer.Exit(code=release_error_exit_code(e))
        case Ok(value):
            return value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def root_option() -> Any:
    return typer.Option(
        None,
        "--root",
        help="Project root (default: VERSYNC_ROOT, else nearest directory with package.json)",
        file_okay=False,
    )


def dev_option() -> Any:
    return typer.Option(False, "--dev", help="Append -dev: commit a dev bump, no tag")


def publish_overrides(
    *,
    branch: str | None,
    remote: str | None,
    tag_prefix: str | None,
    no_sign: bool,
) -> dict[str, object]:
    """Turn CLI publish options into ReleaseConfig overrides."""
    return {
        "branch": branch,
        "remote": remote,
        "tag_prefix": tag_prefix,
        "sign": False if no_sign else None,
    }


def branch_option() -> Any:
    return typer.Option(None, "--branch", help="Branch to push (default: master)")


def remote_option() -> Any:
    return typer.Option(None, "--remote", help="Remote to push to (default: origin)")


def tag_prefix_option() -> Any:
    return typer.Option(None, "--tag-prefix", help="Prefix for the release tag, e.g. v")


def no_sign_option() -> Any:
    return typer.Option(False, "--no-sign", help="Do not GPG-sign the commit (drops -S)")
