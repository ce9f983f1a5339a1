#!/usr/bin/env python3
"""
Main CLI entry point for zjsidebar
"""

import typer

from zjsidebar import __version__
from zjsidebar.commands.sidebar import app as sidebar_app
from zjsidebar.utils.logging import setup_logging


def version():
    """Show zjsidebar version"""
    typer.echo(f"zjsidebar version {__version__}")


def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    zjsidebar - status sidebar for terminal multiplexer tabs

    [bold]Examples:[/bold]

    Flash tab 2 until it is visited:
        [cyan]zjsidebar notify 2[/cyan]

    Report a finished command from a shell hook:
        [cyan]zjsidebar alert --exit-code $?[/cyan]

    Collapse or expand every sidebar:
        [cyan]zjsidebar toggle[/cyan]
    """
    setup_logging(verbose)


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(
        name="zjsidebar",
        help="Status sidebar for terminal multiplexer tabs",
        rich_markup_mode="rich",
    )
    app.callback()(main)
    for command in sidebar_app.registered_commands:
        app.registered_commands.append(command)
    app.command()(version)
    return app


# Create the app instance
app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
