"""Filesystem helpers.

Manifest, descriptor and lock file rewrites go through these helpers so a
failed write never leaves a truncated file behind, and an up-to-date file
is never rewritten.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "write_text_if_changed"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace.

    An existing target keeps its permission bits.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def write_text_if_changed(
    path: Path, content: str, *, previous: str | None, encoding: str = "utf-8"
) -> bool:
    """Atomically write content unless it equals previous.

    Returns True when the file was written.

    Raises:
        OSError: When the write fails.
    """
    if previous == content:
        return False
    atomic_write_text(path, content, encoding=encoding)
    return True
