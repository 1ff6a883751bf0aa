"""Registry backed by cargo's local sparse-index cache.

Cargo keeps a copy of every index file it has fetched under
``$CARGO_HOME/registry/index/index.crates.io-<hash>/.cache``. Reading it
needs no network and reflects the index as of cargo's last fetch.

Each cache file is laid out as::

    u8   cache version
    u32  index format version (little endian)
    str  index version (e.g. an ETag), NUL terminated
    then repeated: version string NUL, JSON record NUL
"""

from __future__ import annotations

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from semver import Version

from capctl.core.paths import find_index_cache_dirs
from capctl.registry.base import (
    PackageNotFoundError,
    Registry,
    RegistryEntry,
    RegistryError,
    index_path,
    parse_index_lines,
    select_latest_version,
)

logger = logging.getLogger(__name__)

# One byte cache version plus four bytes index format version
_HEADER_SIZE = 5


def parse_cache_file(data: bytes) -> list[dict[str, Any]]:
    """Parse the records of a cargo index cache file.

    Args:
        data: Raw file contents.

    Returns:
        Index records in file order.

    Raises:
        RegistryError: If the header is truncated.
    """
    if len(data) < _HEADER_SIZE:
        msg = "Truncated index cache file"
        raise RegistryError(msg)

    # Drop the index version; what remains alternates version, record
    parts = data[_HEADER_SIZE:].split(b"\0")[1:]
    return parse_index_lines(parts[1::2])


class CachedIndexRegistry(Registry):
    """Registry reading cargo's on-disk index cache.

    Attributes:
        cache_dirs: Cache directories searched, most recent first.
    """

    def __init__(self, cargo_home: Path, *, max_workers: int = 8) -> None:
        """Initialize the registry.

        Args:
            cargo_home: Cargo home whose registry cache is read.
            max_workers: Worker threads used by search.

        Raises:
            RegistryError: If cargo has no cached crates.io index.
        """
        self.cache_dirs = find_index_cache_dirs(cargo_home)
        if not self.cache_dirs:
            msg = f"No cached crates.io index under {cargo_home}; run without --cached"
            raise RegistryError(msg)
        self._max_workers = max(1, max_workers)

    @property
    def display_name(self) -> str:
        """Return the cached registry name."""
        return "crates.io (cached index)"

    def get_latest_version(self, name: str) -> Version:
        """Get the latest cached version of a package.

        Raises:
            PackageNotFoundError: If no cache directory has the package.
            RegistryError: If the cache file cannot be read or holds no version.
        """
        relative = index_path(name)
        for cache_dir in self.cache_dirs:
            path = cache_dir / relative
            if path.is_file():
                return self._read_latest(path, name)
        raise PackageNotFoundError(name, self.display_name)

    def search(self, pattern: str) -> list[RegistryEntry]:
        """Match every cached package name against a regular expression.

        Matching files are read in parallel.

        Raises:
            re.error: If the pattern is not a valid regular expression.
        """
        regex = re.compile(pattern)

        matches: dict[str, Path] = {}
        for cache_dir in self.cache_dirs:
            for root, _dirs, files in os.walk(cache_dir):
                for file_name in files:
                    if file_name not in matches and regex.search(file_name):
                        matches[file_name] = Path(root) / file_name

        if not matches:
            return []

        workers = min(self._max_workers, len(matches))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(self._search_entry, matches.items()))

        return sorted(entry for entry in results if entry is not None)

    def _search_entry(self, item: tuple[str, Path]) -> RegistryEntry | None:
        name, path = item
        try:
            return RegistryEntry(name, self._read_latest(path, name))
        except RegistryError as e:
            logger.debug("Skipping cached entry %s: %s", path, e)
            return None

    def _read_latest(self, path: Path, name: str) -> Version:
        try:
            data = path.read_bytes()
        except OSError as e:
            msg = f"Failed to read index cache {path}: {e}"
            raise RegistryError(msg) from e

        latest = select_latest_version(parse_cache_file(data))
        if latest is None:
            msg = f"No valid versions of {name} in {path}"
            raise RegistryError(msg)
        return latest
