from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from versync.core.config import ReleaseConfig, load_config_or_default
from versync.core.errors import ErrorCode
from versync.core.project import ProjectRoot, detect_project
from versync.core.result import Err
from versync.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: ProjectRoot
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(*, root: Path | None = None, **overrides: object) -> CLIContext:
    """Resolve the project root, load versync.toml and apply CLI overrides.

    Overrides whose value is None leave the configured value alone.
    """
    project_result = detect_project(explicit=root)
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    project = project_result.value

    config_result = load_config_or_default(project.path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        project=project,
        config=config_result.value.with_overrides(**overrides),
        console=RichConsole(),
    )
