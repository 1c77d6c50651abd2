"""Release services: version source, file synchronizers, git publisher, transaction."""

from versync.services.release.errors import ReleaseError
from versync.services.release.service import ReleaseOutcome, ReleaseTransaction

__all__ = ["ReleaseError", "ReleaseOutcome", "ReleaseTransaction"]
