"""Abstract base class for local package discovery.

This module defines the Scanner interface that every discovery strategy
must implement, and the error raised when a strategy cannot produce
an inventory.
"""

from abc import ABC, abstractmethod

from capctl.models.package import ExecutableMap


class DiscoveryError(RuntimeError):
    """Raised when installed packages cannot be discovered."""


class Scanner(ABC):
    """Abstract base class for all discovery strategies.

    Scanners map each installed package (name and version) to the
    executables it installed.

    Example:
        >>> scanner = CratesManifestScanner(Path.home() / ".cargo")
        >>> if scanner.is_available():
        ...     for key, executables in scanner.scrape().items():
        ...         print(f"{key.name} {key.version}: {len(executables)}")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short human-readable name for this strategy."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the data source of this strategy exists.

        Returns:
            True if scraping can be attempted, False otherwise.
        """

    @abstractmethod
    def scrape(self) -> ExecutableMap:
        """Discover installed packages and their executables.

        Returns:
            Mapping of package key to the executables of that package.

        Raises:
            DiscoveryError: If the data source is missing or malformed.
        """
