"""Inventory of locally installed packages.

Builds a sorted, immutable snapshot of installed packages from the first
discovery strategy that succeeds, and answers lookups against it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from enum import Enum

from rich.markup import escape

from capctl.models.package import ExecutableMap, Package
from capctl.scanners.base import DiscoveryError, Scanner
from capctl.utils.formatting import console, styled_package

logger = logging.getLogger(__name__)


class PackageFormatting(str, Enum):
    """Listing styles for an inventory."""

    LONG = "long"
    SHORT = "short"


class PackageInventory:
    """Sorted snapshot of installed packages for one command invocation.

    The inventory never changes after construction.

    Example:
        >>> inventory = PackageInventory.build(scanners)
        >>> package = inventory.get("ripgrep")
        >>> package.version if package else None
        Version(major=14, minor=1, patch=0, prerelease=None, build=None)
    """

    __slots__ = ("_packages",)

    def __init__(self, packages: Sequence[Package] = ()) -> None:
        """Initialize the inventory.

        Args:
            packages: Packages in any order; they are sorted here.
        """
        self._packages: tuple[Package, ...] = tuple(sorted(packages))

    @classmethod
    def from_mapping(cls, mapping: ExecutableMap) -> PackageInventory:
        """Create an inventory from a discovery result.

        Args:
            mapping: Package keys mapped to their executables.

        Returns:
            Sorted inventory with one package per key.
        """
        return cls([Package.from_key(key, executables) for key, executables in mapping.items()])

    @classmethod
    def build(cls, scanners: Sequence[Scanner]) -> PackageInventory:
        """Discover installed packages using the first strategy that succeeds.

        Strategies are tried in order. A failing strategy is logged and the
        next one is tried.

        Args:
            scanners: Discovery strategies, most trusted first.

        Returns:
            Inventory built from the first successful strategy.

        Raises:
            DiscoveryError: If every strategy failed; chained from the first failure.
        """
        first_error: DiscoveryError | None = None

        for index, scanner in enumerate(scanners):
            try:
                mapping = scanner.scrape()
            except DiscoveryError as e:
                if first_error is None:
                    first_error = e
                if index + 1 < len(scanners):
                    logger.warning(
                        "Failed to scrape %s (%s). Falling back to %s.",
                        scanner.name,
                        e,
                        scanners[index + 1].name,
                    )
                else:
                    logger.debug("Failed to scrape %s: %s", scanner.name, e)
                continue

            logger.debug("Discovered %d packages via %s", len(mapping), scanner.name)
            return cls.from_mapping(mapping)

        msg = "Unable to scrape package metadata."
        if first_error is not None:
            msg = f"{msg} {first_error}"
        raise DiscoveryError(msg) from first_error

    def packages(self) -> Iterator[Package]:
        """Iterate over installed packages in sorted order.

        Each call returns a fresh iterator.
        """
        return iter(self._packages)

    def __iter__(self) -> Iterator[Package]:
        return self.packages()

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def get(self, name: str) -> Package | None:
        """Look up an installed package by name.

        Discovery keys on name and version, so several entries may share a
        name. In that case the highest installed version is returned.

        Args:
            name: Package name.

        Returns:
            The matching package, or None if it is not installed.
        """
        matches = [package for package in self._packages if package.name == name]
        if not matches:
            return None
        if len(matches) > 1:
            logger.debug(
                "Package %s is installed in %d versions, using %s",
                name,
                len(matches),
                matches[-1].version,
            )
        # Sorted by (name, version, ...): the last match has the highest version
        return matches[-1]

    def format_lines(self, formatting: PackageFormatting) -> list[str]:
        """Render the inventory as Rich markup lines.

        Args:
            formatting: LONG lists executables on indented lines, SHORT
                joins them after the version.

        Returns:
            Lines ready for console output.
        """
        lines: list[str] = []
        for package in self._packages:
            header = f"{styled_package(package.name)} [version](v{package.version})[/]"
            if formatting == PackageFormatting.SHORT:
                lines.append(f"{header}: {escape(', '.join(package.executable_names))}")
            else:
                lines.append(header)
                lines.extend(f"  {escape(name)}" for name in package.executable_names)
        return lines

    def print(self, formatting: PackageFormatting = PackageFormatting.LONG) -> None:
        """Print the inventory to the console."""
        for line in self.format_lines(formatting):
            console.print(line, highlight=False, soft_wrap=True)
