"""crates.io registry client.

Latest versions come from the sparse index, which serves one small
newline-delimited JSON file per package. Search and package details come
from the crates.io web API.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx
from semver import Version

from capctl.core.config import Settings
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

# Status codes the sparse index uses for unknown packages
_NOT_FOUND_STATUSES = frozenset({404, 410, 451})

# Characters that carry regex meaning; stripped to build the API search term
_REGEX_META_RE = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True, slots=True)
class CrateInfo:
    """Published details of a package.

    Attributes:
        name: Package name.
        max_version: Latest published version.
        description: Short description from the package manifest.
        downloads: All-time download count.
        homepage: Homepage URL.
        repository: Source repository URL.
        documentation: Documentation URL.
    """

    name: str
    max_version: Version
    description: str | None = None
    downloads: int = 0
    homepage: str | None = None
    repository: str | None = None
    documentation: str | None = None


class CratesIoRegistry(Registry):
    """Registry client for crates.io over HTTP.

    Attributes:
        index_url: Base URL of the sparse index.
        api_url: Base URL of the web API.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Endpoints, user agent and timeouts. Defaults if None.
            client: Preconfigured HTTP client; created from settings if None.
        """
        settings = settings or Settings()
        self.index_url = settings.index_url.rstrip("/")
        self.api_url = settings.api_url.rstrip("/")
        self._search_limit = settings.search_limit
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            timeout=settings.request_timeout,
            follow_redirects=True,
        )

    @property
    def display_name(self) -> str:
        """Return 'crates.io'."""
        return "crates.io"

    def close(self) -> None:
        """Close the HTTP client if this registry created it."""
        if self._owns_client:
            self._client.close()

    def get_latest_version(self, name: str) -> Version:
        """Get the latest version of a package from the sparse index.

        Raises:
            PackageNotFoundError: If the index has no file for the package.
            RegistryError: On network errors or unusable index data.
        """
        url = f"{self.index_url}/{index_path(name)}"
        logger.debug("Fetching index entry %s", url)
        response = self._get(url, name)

        latest = select_latest_version(parse_index_lines(response.text.splitlines()))
        if latest is None:
            msg = f"No valid versions of {name} in the {self.display_name} index"
            raise RegistryError(msg)
        return latest

    def search(self, pattern: str) -> list[RegistryEntry]:
        """Search crates.io and keep names matching the pattern.

        The API takes a plain search term, so the regex is reduced to its
        literal word characters for the query and then applied to every
        returned name.

        Raises:
            re.error: If the pattern is not a valid regular expression.
            RegistryError: On network errors or an unexpected response.
        """
        regex = re.compile(pattern)
        term = _REGEX_META_RE.sub(" ", pattern).strip()
        params: dict[str, str | int] = {"per_page": self._search_limit}
        if term:
            params["q"] = term

        response = self._get(f"{self.api_url}/crates", pattern, params=params)
        payload = self._json(response)
        crates = payload.get("crates")
        if not isinstance(crates, list):
            msg = f"Unexpected search response from {self.display_name}"
            raise RegistryError(msg)

        entries: list[RegistryEntry] = []
        for item in crates:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            if not isinstance(name, str) or regex.search(name) is None:
                continue
            version = _parse_optional_version(
                item.get("max_stable_version") or item.get("max_version")
            )
            if version is None:
                logger.debug("Skipping search hit %s without a valid version", name)
                continue
            entries.append(RegistryEntry(name, version))

        return sorted(entries)

    def info(self, name: str) -> CrateInfo:
        """Get published details of a package.

        Raises:
            PackageNotFoundError: If the package does not exist.
            RegistryError: On network errors or an unexpected response.
        """
        response = self._get(f"{self.api_url}/crates/{name}", name)
        crate = self._json(response).get("crate")
        if not isinstance(crate, dict):
            msg = f"Unexpected response for {name} from {self.display_name}"
            raise RegistryError(msg)

        max_version = _parse_optional_version(
            crate.get("max_stable_version") or crate.get("max_version")
        )
        if max_version is None:
            msg = f"No valid version for {name} on {self.display_name}"
            raise RegistryError(msg)

        downloads = crate.get("downloads")
        return CrateInfo(
            name=str(crate.get("name") or name),
            max_version=max_version,
            description=_optional_str(crate.get("description")),
            downloads=downloads if isinstance(downloads, int) else 0,
            homepage=_optional_str(crate.get("homepage")),
            repository=_optional_str(crate.get("repository")),
            documentation=_optional_str(crate.get("documentation")),
        )

    def _get(
        self,
        url: str,
        package: str,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        """Issue a GET request and map failures to registry errors."""
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            msg = f"Request to {self.display_name} failed: {e}"
            raise RegistryError(msg) from e

        if response.status_code in _NOT_FOUND_STATUSES:
            raise PackageNotFoundError(package, self.display_name)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"{self.display_name} returned HTTP {e.response.status_code} for {url}"
            raise RegistryError(msg) from e
        return response

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object response."""
        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Invalid JSON from {self.display_name}: {e}"
            raise RegistryError(msg) from e
        if not isinstance(payload, dict):
            msg = f"Unexpected response from {self.display_name}"
            raise RegistryError(msg)
        return payload


def _parse_optional_version(value: object) -> Version | None:
    if not isinstance(value, str):
        return None
    try:
        return Version.parse(value)
    except ValueError:
        return None


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
