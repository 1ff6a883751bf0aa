"""Shared types and utilities for CLI commands.

This module provides helper functions used across multiple CLI command
modules: settings access, scanner and registry construction, and
inventory building with uniform error reporting.
"""

import typer

from capctl.core.config import Settings
from capctl.core.inventory import PackageInventory
from capctl.core.paths import get_cargo_bin_dir, get_cargo_home
from capctl.registry.base import Registry, RegistryError
from capctl.registry.cache import CachedIndexRegistry
from capctl.registry.crates_io import CratesIoRegistry
from capctl.scanners.base import DiscoveryError, Scanner
from capctl.scanners.binary import BinaryInvocationScanner
from capctl.scanners.manifest import CratesManifestScanner
from capctl.utils.formatting import print_error


def get_settings(ctx: typer.Context) -> Settings:
    """Return the settings loaded by the main callback.

    Args:
        ctx: Current Typer context.

    Returns:
        Settings stored in the context, or defaults when none were loaded.
    """
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and isinstance(obj.get("settings"), Settings):
        return obj["settings"]
    return Settings()


def get_scanners(settings: Settings) -> list[Scanner]:
    """Get discovery strategies in the order they are tried.

    Args:
        settings: Application settings.

    Returns:
        The cargo metadata scanner followed by the binary invocation fallback.
    """
    cargo_home = get_cargo_home(settings.cargo_home)
    return [
        CratesManifestScanner(cargo_home),
        BinaryInvocationScanner(
            get_cargo_bin_dir(cargo_home),
            version_flag=settings.version_flag,
            probe_timeout=settings.probe_timeout,
            max_workers=settings.max_workers,
        ),
    ]


def build_inventory(settings: Settings) -> PackageInventory:
    """Build the inventory or exit with an error.

    Raises:
        typer.Exit: With code 1 if no discovery strategy succeeded.
    """
    try:
        return PackageInventory.build(get_scanners(settings))
    except DiscoveryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def open_registry(settings: Settings, cached: bool = False) -> Registry:
    """Create the registry client for a command.

    Args:
        settings: Application settings.
        cached: Read cargo's local index cache instead of the network.

    Returns:
        Registry to be used as a context manager.

    Raises:
        typer.Exit: With code 1 if the cached index is unavailable.
    """
    if not cached:
        return CratesIoRegistry(settings)
    try:
        return CachedIndexRegistry(
            get_cargo_home(settings.cargo_home),
            max_workers=settings.max_workers,
        )
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
