"""Application settings.

This module provides the settings model and I/O functions for capctl.
Settings control where cargo lives, which registry endpoints are queried,
and how local executables are probed during fallback discovery.

Settings are stored in ~/.config/capctl/config.toml. A missing file
means "use the defaults".
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from capctl import __version__
from capctl.core.paths import get_settings_path

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://index.crates.io"
DEFAULT_API_URL = "https://crates.io/api/v1"
DEFAULT_USER_AGENT = f"capctl/{__version__} (cargo package manager front end)"


class Settings(BaseModel):
    """Configuration for capctl.

    Attributes:
        cargo_home: Cargo home directory. If None, uses $CARGO_HOME or ~/.cargo.
        cargo_command: Cargo executable used to install and uninstall packages.
        index_url: Base URL of the crates.io sparse index.
        api_url: Base URL of the crates.io web API (search, info).
        user_agent: User-Agent sent with every registry request.
        request_timeout: Timeout in seconds for registry requests.
        version_flag: Flag passed to executables during fallback discovery.
        probe_timeout: Timeout in seconds for a single executable probe.
        max_workers: Worker threads used for parallel discovery and search.
        search_limit: Maximum number of candidates requested from the search API.
    """

    model_config = ConfigDict(extra="forbid")

    cargo_home: Annotated[
        Path | None,
        Field(description="Cargo home (None = $CARGO_HOME or ~/.cargo)"),
    ] = None
    cargo_command: Annotated[
        str,
        Field(min_length=1, description="Cargo executable"),
    ] = "cargo"
    index_url: Annotated[
        str,
        Field(min_length=1, description="Sparse index base URL"),
    ] = DEFAULT_INDEX_URL
    api_url: Annotated[
        str,
        Field(min_length=1, description="Registry web API base URL"),
    ] = DEFAULT_API_URL
    user_agent: Annotated[
        str,
        Field(min_length=1, description="User-Agent for registry requests"),
    ] = DEFAULT_USER_AGENT
    request_timeout: Annotated[
        float,
        Field(gt=0, le=300, description="Registry request timeout in seconds"),
    ] = 30.0
    version_flag: Annotated[
        str,
        Field(min_length=1, description="Flag used to query an executable's version"),
    ] = "--version"
    probe_timeout: Annotated[
        float,
        Field(gt=0, le=120, description="Executable probe timeout in seconds"),
    ] = 10.0
    max_workers: Annotated[
        int,
        Field(ge=1, le=64, description="Parallel workers (1-64)"),
    ] = 8
    search_limit: Annotated[
        int,
        Field(ge=1, le=100, description="Search candidates per request (1-100)"),
    ] = 50


class SettingsError(Exception):
    """Raised when the settings file cannot be read or is invalid."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default settings path.

    Returns:
        Validated Settings object; defaults if the file doesn't exist.

    Raises:
        SettingsError: If the file cannot be read, parsed, or validated.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise SettingsError(f"Invalid encoding in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings {settings_path}: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save the settings. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data = settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def settings_to_dict(settings: Settings) -> dict[str, object]:
    """Convert Settings to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.

    Args:
        settings: The Settings to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    data = settings.model_dump(mode="json")
    return {key: value for key, value in data.items() if value is not None}
