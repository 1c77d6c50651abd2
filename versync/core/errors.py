"""Error codes for CLI exit status.

Every failure of a release run maps to one of these codes. They are used as
process exit codes and should remain stable:
- 0: Success
- 1: User error (bad version string, malformed manifest, bad option)
- 2: Environment error (no project found, invalid versync.toml)
- 5: I/O error (descriptor or manifest missing, write failed)
- 6: Git error (a git step exited non-zero)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5
    GIT_ERROR = 6
