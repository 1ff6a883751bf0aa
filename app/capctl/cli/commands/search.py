"""Search and info command implementations.

Finds packages on crates.io and shows details about a single package.
"""

import re
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from capctl.cli.types import get_scanners, get_settings, open_registry
from capctl.core.inventory import PackageInventory
from capctl.registry.base import PackageNotFoundError, RegistryError
from capctl.registry.crates_io import CratesIoRegistry
from capctl.scanners.base import DiscoveryError
from capctl.utils.formatting import (
    console,
    create_search_table,
    print_error,
    print_warning,
    styled_package,
)


def _try_inventory(ctx: typer.Context) -> PackageInventory | None:
    """Build the inventory, or warn and return None if discovery fails."""
    try:
        return PackageInventory.build(get_scanners(get_settings(ctx)))
    except DiscoveryError as e:
        print_warning(f"Installed versions unavailable: {e}")
        return None


def search(
    ctx: typer.Context,
    pattern: Annotated[str, typer.Argument(help="Regular expression matched against names.")],
    cached: Annotated[
        bool,
        typer.Option(
            "--cached",
            "-c",
            help="Search cargo's locally cached registry index instead of the network.",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Limit number of results to display."),
    ] = None,
) -> None:
    """Search the registry for packages.

    Examples:
        capctl search ripgrep          # Names containing 'ripgrep'
        capctl search '^cargo-'        # Cargo subcommands
        capctl search -c '^tokio'      # Search cargo's cached index
    """
    try:
        re.compile(pattern)
    except re.error as e:
        print_error(f"Invalid pattern {pattern!r}: {e}")
        raise typer.Exit(code=1) from e

    settings = get_settings(ctx)
    with open_registry(settings, cached=cached) as registry:
        try:
            with console.status(f"Searching {registry.display_name}..."):
                entries = registry.search(pattern)
        except RegistryError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    if not entries:
        console.print(f"No packages match [muted]{escape(pattern)}[/].")
        return

    inventory = _try_inventory(ctx)
    shown = entries[:limit] if limit is not None else entries

    table = create_search_table(f"Search Results ({registry.display_name})")
    for entry in shown:
        local = inventory.get(entry.name) if inventory is not None else None
        installed = str(local.version) if local else "-"
        table.add_row(escape(entry.name), str(entry.version), installed)
    console.print(table)

    if len(shown) < len(entries):
        console.print(f"\n[dim]Showing {len(shown)} of {len(entries)} matches[/]")


def info(
    ctx: typer.Context,
    package: Annotated[str, typer.Argument(help="The package to describe.")],
) -> None:
    """Show registry details of a package."""
    settings = get_settings(ctx)

    with CratesIoRegistry(settings) as registry:
        try:
            details = registry.info(package)
        except PackageNotFoundError:
            console.print(
                f"Package {styled_package(package)} is "
                f"[error]not available on {registry.display_name}[/]."
            )
            return
        except RegistryError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    inventory = _try_inventory(ctx)
    local = inventory.get(details.name) if inventory is not None else None

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value", style="text")
    table.add_row("Package", styled_package(details.name))
    table.add_row("Latest", f"[latest]{details.max_version}[/]")
    table.add_row("Installed", f"[version]{local.version}[/]" if local else "[muted]-[/]")
    if local and local.executables:
        table.add_row("Executables", escape(", ".join(local.executable_names)))
    table.add_row("Description", escape(details.description or "-"))
    table.add_row("Downloads", f"{details.downloads:,}")
    for label, url in (
        ("Homepage", details.homepage),
        ("Repository", details.repository),
        ("Documentation", details.documentation),
    ):
        if url:
            table.add_row(label, escape(url))

    console.print(table)
