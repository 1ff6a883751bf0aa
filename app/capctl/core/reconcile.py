"""Version reconciliation between installed packages and the registry.

Classifies installed packages as up to date or out of date and reports
the result on the console. Registry lookup failures never escape this
module: they become "not available" outcomes or are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from capctl.core.inventory import PackageInventory
from capctl.models.package import PackageStatus, PackageWithStatus, classify
from capctl.registry.base import Registry, RegistryError
from capctl.utils.formatting import console, styled_package

logger = logging.getLogger(__name__)


def outdated_name_padding(entries: Sequence[PackageWithStatus]) -> int:
    """Return the column width that aligns the given package names.

    Args:
        entries: Packages to be listed.

    Returns:
        Length in characters of the longest name, 0 for no entries.
    """
    return max((len(entry.package.name) for entry in entries), default=0)


class VersionReconciler:
    """Compares installed packages against the latest registry versions.

    Attributes:
        registry: Registry queried for latest versions.
        inventory: Installed packages.
    """

    def __init__(self, registry: Registry, inventory: PackageInventory) -> None:
        self.registry = registry
        self.inventory = inventory

    def check_one(self, name: str) -> PackageWithStatus | None:
        """Check a single installed package for updates.

        Args:
            name: Package name.

        Returns:
            The classified package, or None if it is not installed or the
            registry has no version for it. ``latest_version`` is only set
            when the package is out of date.
        """
        local_package = self.inventory.get(name)
        if local_package is None:
            console.print(f"Package {styled_package(name)} is [error]not installed[/].")
            return None

        try:
            latest_version = self.registry.get_latest_version(local_package.name)
        except RegistryError as e:
            logger.debug("Lookup of %s failed: %s", local_package.name, e)
            console.print(
                f"Package {styled_package(local_package.name)} is "
                f"[error]not available on {self.registry.display_name}[/]."
            )
            return None

        status = classify(local_package.version, latest_version)
        if status == PackageStatus.UP_TO_DATE:
            console.print(
                f"Package {styled_package(local_package.name)} is [success]up to date[/]."
            )
            return PackageWithStatus(local_package, status)

        console.print(
            f"Package {styled_package(local_package.name)} is [outdated]out of date[/] "
            f"([version]{local_package.version}[/] -> [latest]{latest_version}[/])."
        )
        return PackageWithStatus(local_package, status, latest_version)

    def statuses(self) -> list[PackageWithStatus]:
        """Classify every installed package the registry knows.

        Packages whose lookup fails are skipped. Lookups run one after the
        other in inventory order.

        Returns:
            Classified packages, each with its latest version.
        """
        results: list[PackageWithStatus] = []
        for package in self.inventory.packages():
            try:
                latest_version = self.registry.get_latest_version(package.name)
            except RegistryError as e:
                logger.debug("Skipping %s: %s", package.name, e)
                continue
            status = classify(package.version, latest_version)
            results.append(PackageWithStatus(package, status, latest_version))
        return results

    def check_all(self) -> list[PackageWithStatus] | None:
        """Check every installed package for updates.

        Returns:
            Out-of-date packages in inventory order, or None when every
            package with a known registry version is up to date.
        """
        outdated = [entry for entry in self.statuses() if entry.is_out_of_date]

        if not outdated:
            console.print("All packages are [success]up to date[/].")
            return None

        padding = outdated_name_padding(outdated)
        for entry in outdated:
            console.print(
                f"{styled_package(entry.package.name.ljust(padding))} is "
                f"[outdated]out of date[/] "
                f"([version]{entry.package.version}[/] -> [latest]{entry.latest_version}[/])",
                highlight=False,
            )

        return outdated
