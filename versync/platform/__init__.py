"""Platform layer: subprocess execution and filesystem helpers."""

from versync.platform.files import atomic_write_text
from versync.platform.process import ProcessError, run

__all__ = ["ProcessError", "atomic_write_text", "run"]
