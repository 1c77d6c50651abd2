"""Show command - compare the version recorded in each file."""

from __future__ import annotations

from pathlib import Path

from versync.cli.commands._helpers import exit_on_error, exit_with_code, root_option
from versync.cli.context import build_context
from versync.core.errors import ErrorCode
from versync.output.console import Style
from versync.services.release.lock_file import read_lock_version
from versync.services.release.manifest import read_manifest_version
from versync.services.release.version import read_version


def show(root: Path | None = root_option()) -> None:
    """Show the descriptor, manifest and lock file versions and whether they agree."""
    ctx = build_context(root=root)
    config = ctx.config
    console = ctx.console

    descriptor = exit_on_error(read_version(config.descriptor_path), ctx)
    manifest = exit_on_error(read_manifest_version(config.manifest_path), ctx)
    lock = exit_on_error(read_lock_version(config.lock_file_path), ctx)

    expected = str(descriptor)
    rows = [
        (config.descriptor, expected),
        (config.manifest, manifest),
        (config.lock_file, lock),
    ]
    width = max(len(name) for name, _ in rows)

    console.header(str(ctx.project))
    mismatched: list[str] = []
    for name, value in rows:
        if value is None and name == config.lock_file and not config.lock_file_path.exists():
            console.print(f"{name.ljust(width)}  (absent)", Style.DIM)
            continue
        shown = value if value is not None else "(unset)"
        if value == expected:
            console.print(f"{name.ljust(width)}  {shown}")
        else:
            console.print(f"{name.ljust(width)}  {shown}", Style.WARNING)
            mismatched.append(name)

    if mismatched:
        console.warning(f"out of sync with {config.descriptor}: {', '.join(mismatched)}")
        exit_with_code(int(ErrorCode.USER_ERROR))
    console.success(f"all files at {expected}")
