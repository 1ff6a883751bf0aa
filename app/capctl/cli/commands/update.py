"""Check and update command implementations.

Compares installed packages with crates.io and updates outdated ones.
"""

from typing import Annotated

import typer

from capctl.cli.types import build_inventory, get_settings, open_registry
from capctl.core.orchestrator import PackageOrchestrator
from capctl.core.reconcile import VersionReconciler
from capctl.operators.cargo import CargoOperator
from capctl.utils.formatting import console, print_error

CachedOption = Annotated[
    bool,
    typer.Option(
        "--cached",
        "-c",
        help="Use cargo's locally cached registry index instead of the network.",
    ),
]


def check(
    ctx: typer.Context,
    package: Annotated[
        str | None,
        typer.Argument(help="Check a specific package."),
    ] = None,
    cached: CachedOption = False,
) -> None:
    """Check for updates.

    Examples:
        capctl check              # Check every installed package
        capctl check ripgrep      # Check ripgrep only
        capctl check --cached     # Use cargo's cached index, no network
    """
    settings = get_settings(ctx)
    inventory = build_inventory(settings)

    with open_registry(settings, cached=cached) as registry:
        reconciler = VersionReconciler(registry, inventory)
        if package is not None:
            reconciler.check_one(package)
            return

        with console.status(f"Checking {len(inventory)} packages..."):
            reconciler.check_all()


def update(
    ctx: typer.Context,
    package: Annotated[
        str | None,
        typer.Argument(help="Update a specific package."),
    ] = None,
    cached: CachedOption = False,
    locked: Annotated[
        bool,
        typer.Option("--locked", "-l", help="Use each package's lockfile."),
    ] = False,
) -> None:
    """Update installed packages.

    Examples:
        capctl update                   # Update every outdated package
        capctl update ripgrep           # Update ripgrep only
        capctl update bat --locked      # Retry a failing build with its lockfile
    """
    settings = get_settings(ctx)
    inventory = build_inventory(settings)

    with open_registry(settings, cached=cached) as registry:
        orchestrator = PackageOrchestrator(
            registry, inventory, CargoOperator(settings.cargo_command)
        )
        try:
            if package is not None:
                orchestrator.update_one(package, locked=locked)
            else:
                orchestrator.update_all(locked=locked)
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
