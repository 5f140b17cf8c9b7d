"""CLI main module for hsh."""

from __future__ import annotations

import typer
from rich.console import Console

from hsh.bootstrap import build_runtime
from hsh.cli.live import run_command, run_motd, run_shell
from hsh.cli.render import Renderer
from hsh.config import load_settings
from hsh.errors import ConfigurationError
from hsh.logging_utils import configure_logging

app = typer.Typer(
    name="hsh",
    help="HackerOS shell: highlighted input, aliases and auto-sudo on top of sh.",
    add_completion=False,
)


@app.command()
def main(
    command: str | None = typer.Option(None, "--command", "-c", help="Dispatch one line and exit"),
    no_motd: bool = typer.Option(False, "--no-motd", help="Skip the startup MOTD script"),
) -> None:
    """Start an interactive hsh session."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    configure_logging(settings.log_level)

    console = Console()
    runtime = build_runtime(settings, console)
    renderer = Renderer(runtime.registry, runtime.session.history, console)

    if command is not None:
        raise typer.Exit(run_command(runtime, renderer, command))

    if not no_motd:
        run_motd(runtime)
    raise typer.Exit(run_shell(runtime, renderer))


if __name__ == "__main__":
    app()
