"""Typed release configuration.

A release transaction is driven by one ReleaseConfig built per invocation:
defaults, then the optional `versync.toml` at the project root, then CLI
overrides. Nothing here is module-global state.

versync.toml:

    [release]
    remote = "origin"
    branch = "master"
    tag_prefix = ""
    sign = true
    manifest = "plugin.xml"
    descriptor = "package.json"
    lock_file = "package-lock.json"
    release_message = ":bookmark: Release bump version: {version}"
    dev_message = "Set -dev suffix"
    git_timeout = 120
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_raw_str, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BRANCH",
    "DEFAULT_DEV_MESSAGE",
    "DEFAULT_RELEASE_MESSAGE",
    "DEFAULT_REMOTE",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "versync.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"
DEFAULT_RELEASE_MESSAGE = ":bookmark: Release bump version: {version}"
DEFAULT_DEV_MESSAGE = "Set -dev suffix"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when versync.toml cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for one release transaction.

    Attributes:
        root: Project root; every file name below is relative to it and
            every git command runs with it as working directory.
        remote: Remote pushed to.
        branch: Branch pushed to.
        tag_prefix: Prepended to the version to form the tag name.
        sign: Pass `-S` to `git commit`.
        manifest: Plugin manifest file name.
        descriptor: Package descriptor file name.
        lock_file: Optional lock descriptor file name.
        release_message: Commit message template for releases.
        dev_message: Commit message template for dev bumps.
        git_timeout: Seconds before a git command is abandoned (None waits forever).
    """

    root: Path
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    tag_prefix: str = ""
    sign: bool = True
    manifest: str = "plugin.xml"
    descriptor: str = "package.json"
    lock_file: str = "package-lock.json"
    release_message: str = DEFAULT_RELEASE_MESSAGE
    dev_message: str = DEFAULT_DEV_MESSAGE
    git_timeout: float | None = None

    @property
    def manifest_path(self) -> Path:
        return self.root / self.manifest

    @property
    def descriptor_path(self) -> Path:
        return self.root / self.descriptor

    @property
    def lock_file_path(self) -> Path:
        return self.root / self.lock_file

    def tag_name(self, version: str) -> str:
        return f"{self.tag_prefix}{version}"

    def commit_message(self, version: str, *, prerelease: bool) -> str:
        template = self.dev_message if prerelease else self.release_message
        return template.replace("{version}", version)

    def with_overrides(self, **overrides: object) -> ReleaseConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_dict(cls, root: Path, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a ReleaseConfig from parsed TOML."""
        release: StrDict = get_table(data, "release") or {}
        defaults = cls(root=root)

        sign = get_bool(release, "sign")
        tag_prefix = get_raw_str(release, "tag_prefix")

        return cls(
            root=root,
            remote=get_str(release, "remote") or defaults.remote,
            branch=get_str(release, "branch") or defaults.branch,
            tag_prefix=tag_prefix if tag_prefix is not None else defaults.tag_prefix,
            sign=sign if sign is not None else defaults.sign,
            manifest=get_str(release, "manifest") or defaults.manifest,
            descriptor=get_str(release, "descriptor") or defaults.descriptor,
            lock_file=get_str(release, "lock_file") or defaults.lock_file,
            release_message=get_str(release, "release_message") or defaults.release_message,
            dev_message=get_str(release, "dev_message") or defaults.dev_message,
            git_timeout=get_float(release, "git_timeout"),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load `versync.toml` from the project root.

    Args:
        root: Project root directory.

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
        (including a missing file).
    """
    path = root / CONFIG_FILE_NAME
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(root, result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load `versync.toml` if present, otherwise return the defaults.

    A missing file is not an error; a malformed one is.
    """
    if not (root / CONFIG_FILE_NAME).is_file():
        return Ok(ReleaseConfig(root=root))
    return load_config(root)
