"""Registry interface and shared index helpers.

A registry answers two questions: what is the latest published version
of a package, and which packages match a name pattern.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from semver import Version

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base exception for registry lookups."""


class PackageNotFoundError(RegistryError):
    """Raised when the registry has no record of a package."""

    def __init__(self, package: str, registry: str = "the registry") -> None:
        self.package = package
        super().__init__(f"Package {package} not found on {registry}")


@dataclass(frozen=True, slots=True, order=True)
class RegistryEntry:
    """A package name with its latest registry version.

    Attributes:
        name: Package name.
        version: Latest version as selected by :func:`select_latest_version`.
    """

    name: str
    version: Version


class Registry(ABC):
    """Abstract base class for registry clients.

    Registries are used as context managers so that network resources are
    released at the end of a command.
    """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Return the name shown to users (e.g., 'crates.io')."""

    @abstractmethod
    def get_latest_version(self, name: str) -> Version:
        """Get the latest version of a package.

        Returns the highest normal (non-prerelease, non-yanked) version, or
        the highest version of any kind when there is no normal one.

        Args:
            name: Package name.

        Returns:
            Latest version.

        Raises:
            PackageNotFoundError: If the package does not exist.
            RegistryError: If the registry cannot be queried.
        """

    @abstractmethod
    def search(self, pattern: str) -> list[RegistryEntry]:
        """Find packages whose name matches a regular expression.

        Args:
            pattern: Regular expression searched within package names.

        Returns:
            Matching entries sorted by name.

        Raises:
            re.error: If the pattern is not a valid regular expression.
            RegistryError: If the registry cannot be queried.
        """

    def close(self) -> None:
        """Release resources held by the registry."""

    def __enter__(self) -> Registry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def index_path(name: str) -> str:
    """Return the relative index path of a package.

    Follows cargo's index layout: names of one, two and three characters
    live under ``1/``, ``2/`` and ``3/<first char>/``; longer names under
    ``<chars 1-2>/<chars 3-4>/``.

    Args:
        name: Package name.

    Returns:
        Lower-cased path such as ``ri/pg/ripgrep``.

    Raises:
        ValueError: If the name is empty.
    """
    lowered = name.lower()
    if not lowered:
        msg = "Package name cannot be empty"
        raise ValueError(msg)
    if len(lowered) <= 2:
        return f"{len(lowered)}/{lowered}"
    if len(lowered) == 3:
        return f"3/{lowered[0]}/{lowered}"
    return f"{lowered[:2]}/{lowered[2:4]}/{lowered}"


def parse_index_lines(lines: Iterable[str | bytes]) -> list[dict[str, Any]]:
    """Parse index records, one JSON object per line.

    Blank and malformed lines are skipped.
    """
    records: list[dict[str, Any]] = []
    for line in lines:
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping malformed index line: %r", line[:100])
            continue
        if isinstance(record, dict):
            records.append(record)
    return records


def select_latest_version(records: Iterable[dict[str, Any]]) -> Version | None:
    """Select the latest version from index records.

    Args:
        records: Index records with ``vers`` and ``yanked`` keys.

    Returns:
        Highest non-yanked, non-prerelease version; otherwise the highest
        version of any kind; None if no record holds a valid version.
    """
    normal: list[Version] = []
    every: list[Version] = []

    for record in records:
        vers = record.get("vers")
        if not isinstance(vers, str):
            continue
        try:
            version = Version.parse(vers)
        except ValueError:
            logger.debug("Skipping unparseable version %r", vers)
            continue
        every.append(version)
        if not record.get("yanked", False) and version.prerelease is None:
            normal.append(version)

    if normal:
        return max(normal)
    if every:
        return max(every)
    return None
