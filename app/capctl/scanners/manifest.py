"""Cargo install-tracking scanner implementation.

Reads the ``.crates.toml`` file cargo maintains for everything installed
with ``cargo install``. This is the primary discovery strategy.
"""

import logging
import tomllib
from pathlib import Path

from semver import Version

from capctl.core.paths import get_crates_manifest_path
from capctl.models.package import ExecutableMap, PackageExecutable, PackageKey
from capctl.scanners.base import DiscoveryError, Scanner

logger = logging.getLogger(__name__)


class CratesManifestScanner(Scanner):
    """Scanner for cargo's install tracking metadata.

    The ``[v1]`` table of ``.crates.toml`` maps package ids of the form
    ``"<name> <version> (<source>)"`` to the list of installed executables::

        [v1]
        "ripgrep 14.1.0 (registry+https://github.com/rust-lang/crates.io-index)" = ["rg"]
    """

    def __init__(self, cargo_home: Path) -> None:
        """Initialize the scanner.

        Args:
            cargo_home: Cargo home directory holding ``.crates.toml``.
        """
        self._cargo_home = cargo_home

    @property
    def name(self) -> str:
        """Return the strategy name."""
        return "cargo install metadata"

    @property
    def manifest_path(self) -> Path:
        """Path of the tracking file this scanner reads."""
        return get_crates_manifest_path(self._cargo_home)

    def is_available(self) -> bool:
        """Check if the cargo home and its tracking file exist."""
        return self._cargo_home.is_dir() and self.manifest_path.is_file()

    def scrape(self) -> ExecutableMap:
        """Read installed packages from ``.crates.toml``.

        Returns:
            Mapping of package key to installed executables.

        Raises:
            DiscoveryError: If the file is absent, not valid TOML, or holds
                entries that cannot be parsed.
        """
        if not self._cargo_home.is_dir():
            msg = f"Cargo home {self._cargo_home} does not exist"
            raise DiscoveryError(msg)

        path = self.manifest_path
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            msg = f"Cargo install metadata not found: {path}"
            raise DiscoveryError(msg) from e
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise DiscoveryError(msg) from e
        except UnicodeDecodeError as e:
            msg = f"Invalid encoding in {path}: {e}"
            raise DiscoveryError(msg) from e
        except OSError as e:
            msg = f"Failed to read {path}: {e}"
            raise DiscoveryError(msg) from e

        installs = data.get("v1")
        if not isinstance(installs, dict):
            msg = f"Missing [v1] table in {path}"
            raise DiscoveryError(msg)

        packages: ExecutableMap = {}
        for package_id, executables in installs.items():
            key = parse_package_id(package_id)
            if not isinstance(executables, list) or not all(
                isinstance(name, str) for name in executables
            ):
                msg = f"Invalid executable list for {package_id!r} in {path}"
                raise DiscoveryError(msg)

            packages.setdefault(key, []).extend(PackageExecutable(name) for name in executables)

        logger.debug("Found %d packages in %s", len(packages), path)
        return packages


def parse_package_id(package_id: str) -> PackageKey:
    """Parse a cargo package id into a package key.

    Args:
        package_id: Id such as ``"bat 0.24.0 (registry+https://...)"``.

    Returns:
        PackageKey with the package name and version.

    Raises:
        DiscoveryError: If the id has no name and version or the version
            is not a valid semantic version.
    """
    parts = package_id.split()
    if len(parts) < 2:
        msg = f"Malformed package id: {package_id!r}"
        raise DiscoveryError(msg)

    name, version_str = parts[0], parts[1]
    try:
        version = Version.parse(version_str)
    except ValueError as e:
        msg = f"Invalid version {version_str!r} in package id {package_id!r}"
        raise DiscoveryError(msg) from e

    return PackageKey(name, version)
