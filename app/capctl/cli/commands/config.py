"""Settings commands.

Shows the effective settings and writes a default settings file.
"""

from typing import Annotated

import typer
from rich.table import Table

from capctl.cli.types import get_settings
from capctl.core.config import Settings, SettingsError, save_settings, settings_to_dict
from capctl.core.paths import get_cargo_home, get_settings_path
from capctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize capctl settings.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    settings = get_settings(ctx)
    path = get_settings_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value", style="text")

    values = settings_to_dict(settings)
    for key in Settings.model_fields:
        if key == "cargo_home":
            table.add_row(key, f"{get_cargo_home(settings.cargo_home)} [muted](resolved)[/]")
        else:
            table.add_row(key, str(values.get(key, "-")))

    console.print(table)
    source = str(path) if path.exists() else f"{path} (not present, using defaults)"
    console.print(f"\n[dim]Settings file: {source}[/]", soft_wrap=True)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path}")
        print_info("Use --force to overwrite it.")
        return

    try:
        saved = save_settings(Settings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default settings to {saved}")
