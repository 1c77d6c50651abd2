from __future__ import annotations

import typer

from versync import __version__
from versync.cli.commands.plan import plan
from versync.cli.commands.run_cmd import run
from versync.cli.commands.show import show


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Keep plugin.xml, package.json and the lock file on one version, then publish with git.",
)


app.command()(run)
app.command()(plan)
app.command()(show)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()
