"""Binary invocation scanner implementation.

Discovers installed packages by running every executable in the cargo
bin directory with a version flag and reading the banner it prints.

This is a lot slower than reading cargo's install metadata and only
intended as a fallback when that fails. It is a heuristic: an
executable's self-reported name does not have to match the package
that installed it.
"""

import logging
import re
import subprocess
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from pathlib import Path

from semver import Version

from capctl.models.package import (
    ExecutableMap,
    PackageExecutable,
    PackageKey,
    merge_executable_maps,
)
from capctl.scanners.base import DiscoveryError, Scanner
from capctl.utils.shell import run_command

logger = logging.getLogger(__name__)

# Not a semver parser; finds the first version-looking substring of a word
VERSION_RE = re.compile(r"v?(\d+\.\d+(?:\.\d+)?)")


def find_version(text: str) -> Version | None:
    """Find the first semantic version in a block of text.

    Words are scanned left to right, line by line. The first regex match
    in a word is handed to the strict semver parser; the first word whose
    match parses wins. A two-component match such as ``1.2`` never parses.

    Args:
        text: Output of a version query.

    Returns:
        The first parseable version, or None.
    """
    for line in text.splitlines():
        for word in line.split():
            match = VERSION_RE.search(word)
            if match is None:
                continue
            try:
                return Version.parse(match.group(1))
            except ValueError:
                continue
    logger.debug("Unable to find version in output: %r", text[:200])
    return None


def parse_version_banner(output: str) -> tuple[str, Version] | None:
    """Extract a package name and version from version-query output.

    The first word of the first line is taken as the package name
    (lower-cased); the version comes from :func:`find_version`.

    Args:
        output: Standard output of ``<executable> --version``.

    Returns:
        Tuple of (name, version), or None if either is missing.
    """
    lines = output.splitlines()
    words = lines[0].split() if lines else []
    if not words:
        return None

    version = find_version(output)
    if version is None:
        return None

    return words[0].lower(), version


class BinaryInvocationScanner(Scanner):
    """Scanner that probes installed executables for their version.

    Probes run on a thread pool. Every worker folds its share of the
    executables into a private map; the partial maps are merged once all
    workers are done, so no shared state is mutated concurrently.

    Attributes:
        bin_dir: Directory whose executables are probed.
    """

    def __init__(
        self,
        bin_dir: Path,
        *,
        version_flag: str = "--version",
        probe_timeout: float = 10.0,
        max_workers: int = 8,
    ) -> None:
        """Initialize the scanner.

        Args:
            bin_dir: Directory holding installed executables.
            version_flag: Flag that makes an executable print its version.
            probe_timeout: Seconds to wait for a single executable.
            max_workers: Maximum number of worker threads.
        """
        self.bin_dir = bin_dir
        self._version_flag = version_flag
        self._probe_timeout = probe_timeout
        self._max_workers = max(1, max_workers)

    @property
    def name(self) -> str:
        """Return the strategy name."""
        return "binary invocation"

    def is_available(self) -> bool:
        """Check if the bin directory exists."""
        return self.bin_dir.is_dir()

    def scrape(self) -> ExecutableMap:
        """Probe every executable in the bin directory.

        Executables that fail to run or print no recognizable banner are
        skipped silently.

        Returns:
            Mapping of package key to executables reporting that key.

        Raises:
            DiscoveryError: If the bin directory cannot be read.
        """
        candidates = self._list_candidates()
        if not candidates:
            return {}

        workers = min(self._max_workers, len(candidates))
        chunks = [candidates[i::workers] for i in range(workers)]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            partials = list(executor.map(self._scrape_chunk, chunks))

        return reduce(merge_executable_maps, partials, {})

    def _list_candidates(self) -> list[Path]:
        """List regular files in the bin directory.

        Raises:
            DiscoveryError: If the directory cannot be read.
        """
        try:
            entries = list(self.bin_dir.iterdir())
        except OSError as e:
            msg = f"Unable to read cargo bin dir {self.bin_dir}: {e}"
            raise DiscoveryError(msg) from e

        return sorted(entry for entry in entries if entry.is_file() and not entry.is_symlink())

    def _scrape_chunk(self, paths: list[Path]) -> ExecutableMap:
        """Probe a share of the executables into a private map."""
        found: ExecutableMap = {}
        for path in paths:
            probed = self._probe(path)
            if probed is None:
                continue
            key, executable = probed
            found.setdefault(key, []).append(executable)
        return found

    def _probe(self, path: Path) -> tuple[PackageKey, PackageExecutable] | None:
        """Run one executable with the version flag and parse its banner.

        Args:
            path: Executable to run.

        Returns:
            Tuple of (key, executable), or None if the executable is skipped.
        """
        try:
            result = run_command([str(path), self._version_flag], timeout=self._probe_timeout)
        except subprocess.TimeoutExpired:
            logger.debug("Timed out probing %s", path)
            return None
        except OSError as e:
            logger.debug("Failed to run %s: %s", path, e)
            return None

        parsed = parse_version_banner(result.stdout)
        if parsed is None:
            logger.debug("Skipping %s: no name/version in output", path.name)
            return None

        name, version = parsed
        return PackageKey(name, version), PackageExecutable(path.name.lower())
