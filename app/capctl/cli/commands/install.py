"""Install and uninstall command implementations.

Installs packages from crates.io and removes installed packages.
"""

from typing import Annotated

import typer

from capctl.cli.types import build_inventory, get_settings, open_registry
from capctl.core.orchestrator import PackageOrchestrator
from capctl.operators.cargo import CargoOperator
from capctl.utils.formatting import print_error


def install(
    ctx: typer.Context,
    package: Annotated[str, typer.Argument(help="The package to be installed.")],
    locked: Annotated[
        bool,
        typer.Option("--locked", "-l", help="Use the package's lockfile."),
    ] = False,
    forced: Annotated[
        bool,
        typer.Option("--forced", "-f", help="Force installation."),
    ] = False,
    nightly: Annotated[
        bool,
        typer.Option("--nightly", "-n", help="Use a nightly toolchain."),
    ] = False,
) -> None:
    """Install a package.

    Examples:
        capctl install ripgrep            # Install the latest ripgrep
        capctl install bat --locked       # Build with bat's Cargo.lock
        capctl install fd-find --forced   # Reinstall even if present
    """
    settings = get_settings(ctx)
    inventory = build_inventory(settings)

    with open_registry(settings) as registry:
        orchestrator = PackageOrchestrator(
            registry, inventory, CargoOperator(settings.cargo_command)
        )
        try:
            orchestrator.install(package, locked=locked, forced=forced, nightly=nightly)
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e


def uninstall(
    ctx: typer.Context,
    package: Annotated[str, typer.Argument(help="The package to be uninstalled.")],
) -> None:
    """Remove a package."""
    settings = get_settings(ctx)
    inventory = build_inventory(settings)

    with open_registry(settings) as registry:
        orchestrator = PackageOrchestrator(
            registry, inventory, CargoOperator(settings.cargo_command)
        )
        try:
            orchestrator.uninstall(package)
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
