"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from capctl import __version__
from capctl.cli.commands import config, install, list_, search, update
from capctl.core.config import SettingsError, load_settings
from capctl.core.logging import configure_logging
from capctl.utils.formatting import print_error

# Create main Typer app
app = typer.Typer(
    name="capctl",
    help="Install, check and update cargo-installed packages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"capctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Settings file to use instead of ~/.config/capctl/config.toml.",
        ),
    ] = None,
) -> None:
    """capctl - a package manager front end for cargo install.

    Lists installed packages, checks them against crates.io,
    and installs, updates or removes them.
    """
    configure_logging(verbose)

    try:
        settings = load_settings(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings


# Register commands
app.command(name="install")(install.install)
app.command(name="i", hidden=True)(install.install)
app.command(name="uninstall")(install.uninstall)
app.command(name="check")(update.check)
app.command(name="update")(update.update)
app.command(name="list")(list_.list_packages)
app.command(name="search")(search.search)
app.command(name="info")(search.info)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
