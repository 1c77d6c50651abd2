"""Release transaction: synchronize version files, then publish with git."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from versync.core.config import ReleaseConfig
from versync.core.result import Err, Ok, Result
from versync.git.repository import GitOperation, Repository
from versync.output.console import ConsoleProtocol, Style
from versync.services.release.errors import ReleaseError
from versync.services.release.lock_file import sync_lock_file
from versync.services.release.manifest import sync_manifest
from versync.services.release.publisher import plan_operations, publish
from versync.services.release.version import (
    VersionId,
    is_prerelease,
    read_version,
    with_prerelease_suffix,
    write_version,
)


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    version: VersionId
    prerelease: bool
    written: tuple[Path, ...]
    operations: tuple[GitOperation, ...]
    dry_run: bool = False


class ReleaseTransaction:
    """One end-to-end release run against a project root.

    The transaction is a single forward pipeline:

        read version -> [add -dev] -> plugin.xml -> [package.json]
            -> [lock file] -> git steps

    The first failing step ends the run. Files already written stay
    written and git steps already completed stay completed.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        *,
        console: ConsoleProtocol,
        repository: Repository | None = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config
        self._console = console
        self._repository = repository or Repository(config.root, timeout=config.git_timeout)
        self._dry_run = dry_run

    def resolve_version(self, *, prerelease: bool) -> Result[VersionId, ReleaseError]:
        """Read the descriptor version and apply the dev marker when asked."""
        self._console.step("setup", f"Loading {self._config.descriptor}")
        version = read_version(self._config.descriptor_path)
        if isinstance(version, Err):
            return version
        if prerelease:
            return Ok(with_prerelease_suffix(version.value))
        return version

    def plan(self, *, prerelease: bool = False) -> Result[tuple[GitOperation, ...], ReleaseError]:
        """The git steps a run would execute; touches nothing."""
        version = self.resolve_version(prerelease=prerelease)
        if isinstance(version, Err):
            return version
        return Ok(plan_operations(self._config, str(version.value)))

    def sync_files(self, version: VersionId) -> Result[tuple[Path, ...], ReleaseError]:
        """Write version into the manifest, the descriptor and the lock file."""
        config = self._config
        text = str(version)
        written: list[Path] = []

        self._console.step(config.manifest, f"Updating version to: {text}")
        manifest = sync_manifest(config.manifest_path, text, dry_run=self._dry_run)
        if isinstance(manifest, Err):
            return manifest
        if manifest.value:
            written.append(config.manifest_path)
        else:
            self._console.print(f"  {config.manifest} already at {text}", Style.DIM)

        if version.dev:
            self._console.step(config.descriptor, f"Setting version to: {text}")
            descriptor = write_version(config.descriptor_path, version, dry_run=self._dry_run)
            if isinstance(descriptor, Err):
                return descriptor
            if descriptor.value:
                written.append(config.descriptor_path)

        lock = sync_lock_file(config.lock_file_path, text, dry_run=self._dry_run)
        if isinstance(lock, Err):
            return lock
        if lock.value:
            self._console.step("lock", f"Updated {config.lock_file} to: {text}")
            written.append(config.lock_file_path)

        return Ok(tuple(written))

    def run(self, *, prerelease: bool = False) -> Result[ReleaseOutcome, ReleaseError]:
        """Execute the whole transaction.

        Args:
            prerelease: Add the `-dev` marker before synchronizing.

        Returns:
            Ok(ReleaseOutcome) when every applicable step completed
            Err(ReleaseError) from the first step that failed
        """
        version = self.resolve_version(prerelease=prerelease)
        if isinstance(version, Err):
            return version

        written = self.sync_files(version.value)
        if isinstance(written, Err):
            return written

        operations = plan_operations(self._config, str(version.value))
        published = publish(
            self._repository,
            operations,
            console=self._console,
            dry_run=self._dry_run,
        )
        if isinstance(published, Err):
            return published

        return Ok(
            ReleaseOutcome(
                version=version.value,
                prerelease=is_prerelease(version.value),
                written=written.value,
                operations=published.value,
                dry_run=self._dry_run,
            )
        )
