"""List command implementation.

Lists installed packages with their executables.
"""

from typing import Annotated

import typer

from capctl.cli.types import build_inventory, get_settings
from capctl.core.inventory import PackageFormatting
from capctl.utils.formatting import console


def list_packages(
    ctx: typer.Context,
    short: Annotated[
        bool,
        typer.Option("--short", "-s", help="More compact output."),
    ] = False,
) -> None:
    """List installed packages."""
    settings = get_settings(ctx)
    inventory = build_inventory(settings)

    if not len(inventory):
        console.print("[muted]No packages installed.[/]")
        return

    inventory.print(PackageFormatting.SHORT if short else PackageFormatting.LONG)
