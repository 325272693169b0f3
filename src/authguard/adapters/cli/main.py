"""Main CLI application entry point."""

import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console

from .commands import assess_command, config_command, info_command

app = typer.Typer(
    name="authguard",
    help="authguard - guarded authentication use cases and security risk scoring",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


@app.command(name="assess")
def assess(
    alerts_file: Path = typer.Argument(
        ...,
        help="JSON or YAML file with a list of security alerts",
        exists=True,
        dir_okay=False,
    ),
    output_format: str = typer.Option(
        "console",
        "--format", "-f",
        help="Output format (console, json)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output with technical details",
    ),
):
    """
    Score a set of security alerts.

    Prints the risk level and the recommended actions.
    """
    if output_format not in ("console", "json"):
        console.print(f"[red]Unknown format:[/red] {output_format}")
        raise typer.Exit(code=2)
    assess_command(
        alerts_file=alerts_file,
        output_format=output_format,
        verbose=verbose,
        console=console,
    )


@app.command(name="info")
def info(
    config: Optional[str] = typer.Option(
        None,
        "--config", "-c",
        help="Path to configuration file",
    ),
):
    """
    Show system information.

    Displays the version, audit defaults and logging settings.
    """
    info_command(config_path=config, console=console)


@app.command(name="config")
def config_cmd(
    init: bool = typer.Option(
        False,
        "--init",
        help="Create default configuration file",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        help="Configuration file path",
    ),
    show: bool = typer.Option(
        False,
        "--show",
        help="Show current configuration",
    ),
):
    """
    Manage configuration.

    Create or view configuration files.
    """
    config_command(
        init=init,
        path=path,
        show=show,
        console=console,
    )


def main():
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
