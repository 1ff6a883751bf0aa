"""Package models for local discovery and version reconciliation.

This module defines the core data structures for representing
cargo-installed packages, their executables, and their update status
relative to the registry.
"""

from dataclasses import dataclass, field
from enum import Enum

from semver import Version


@dataclass(frozen=True, slots=True, order=True)
class PackageExecutable:
    """An executable produced by an installed package.

    Attributes:
        name: On-disk name of the executable (e.g., 'rg').
    """

    name: str


@dataclass(frozen=True, slots=True, order=True)
class PackageKey:
    """Identity of an installed package during discovery.

    Two installed versions of the same package are distinct keys.

    Attributes:
        name: Package name (e.g., 'ripgrep').
        version: Installed semantic version.
    """

    name: str
    version: Version


# Discovery output: every key maps to the executables found for it
ExecutableMap = dict[PackageKey, list[PackageExecutable]]


@dataclass(frozen=True, slots=True, order=True)
class Package:
    """Represents an installed package with its executables.

    This is an immutable data structure. Packages are totally ordered
    field-wise (name, then version, then executables) so that an
    inventory can be listed deterministically.

    Attributes:
        name: Package name as published on the registry.
        version: Installed semantic version.
        executables: Executables installed by this package.
    """

    name: str
    version: Version
    executables: tuple[PackageExecutable, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not isinstance(self.executables, tuple):
            object.__setattr__(self, "executables", tuple(self.executables))

    @classmethod
    def from_key(cls, key: PackageKey, executables: list[PackageExecutable]) -> "Package":
        """Create a package from a discovery key and its executables."""
        return cls(name=key.name, version=key.version, executables=tuple(executables))

    @property
    def key(self) -> PackageKey:
        """Return the discovery key of this package."""
        return PackageKey(self.name, self.version)

    @property
    def executable_names(self) -> list[str]:
        """Return the names of all executables of this package."""
        return [executable.name for executable in self.executables]


class PackageStatus(Enum):
    """Update status of an installed package relative to the registry."""

    UP_TO_DATE = "up-to-date"
    OUT_OF_DATE = "out-of-date"


@dataclass(frozen=True, slots=True)
class PackageWithStatus:
    """An installed package classified against the registry.

    Attributes:
        package: The installed package.
        status: Whether the package is up to date.
        latest_version: Latest registry version, set when the lookup succeeded
            and the package needs an update.
    """

    package: Package
    status: PackageStatus
    latest_version: Version | None = None

    @property
    def is_out_of_date(self) -> bool:
        """Check if the package has a newer version on the registry."""
        return self.status == PackageStatus.OUT_OF_DATE

    @property
    def name(self) -> str:
        """Return the name of the underlying package."""
        return self.package.name


def classify(local: Version, latest: Version) -> PackageStatus:
    """Classify an installed version against the latest registry version.

    A registry version that is equal to or lower than the local one counts
    as up to date.

    Args:
        local: Installed version.
        latest: Latest version reported by the registry.

    Returns:
        PackageStatus for the installed version.
    """
    if latest <= local:
        return PackageStatus.UP_TO_DATE
    return PackageStatus.OUT_OF_DATE


def merge_executable_maps(left: ExecutableMap, right: ExecutableMap) -> ExecutableMap:
    """Merge two discovery results into a new map.

    Executable lists of keys present in both maps are concatenated. The
    merge is associative and commutative up to list order within a key.

    Args:
        left: First partial discovery result.
        right: Second partial discovery result.

    Returns:
        A new ExecutableMap; neither input is modified.
    """
    merged: ExecutableMap = {key: list(executables) for key, executables in left.items()}
    for key, executables in right.items():
        merged.setdefault(key, []).extend(executables)
    return merged
