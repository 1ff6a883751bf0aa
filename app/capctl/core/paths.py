"""XDG-compliant and cargo path management for capctl.

This module provides standardized paths following the XDG Base Directory
Specification for capctl's own configuration, and resolves the cargo
directories that hold installed packages and the registry index cache.

XDG defaults:
- Config: ~/.config/capctl/

Cargo defaults:
- Home: $CARGO_HOME or ~/.cargo
- Executables: <cargo home>/bin
- Install tracking: <cargo home>/.crates.toml
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "capctl"

# Host of the crates.io sparse index as used in cargo's cache directory names
CRATES_IO_INDEX_HOST = "index.crates.io"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/capctl/ (or XDG_CONFIG_HOME/capctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/capctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/capctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


# =============================================================================
# Cargo paths
# =============================================================================


def get_cargo_home(override: Path | None = None) -> Path:
    """Get the cargo home directory.

    Args:
        override: Explicit cargo home from settings; wins over the environment.

    Returns:
        The override, else $CARGO_HOME, else ~/.cargo.
    """
    if override is not None:
        return override.expanduser()
    env_home = os.environ.get("CARGO_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".cargo"


def get_cargo_bin_dir(cargo_home: Path) -> Path:
    """Get the directory holding installed executables.

    Returns:
        Path to <cargo home>/bin.
    """
    return cargo_home / "bin"


def get_crates_manifest_path(cargo_home: Path) -> Path:
    """Get cargo's install tracking file.

    Returns:
        Path to <cargo home>/.crates.toml.
    """
    return cargo_home / ".crates.toml"


def get_registry_index_dir(cargo_home: Path) -> Path:
    """Get the directory where cargo keeps its registry indexes.

    Returns:
        Path to <cargo home>/registry/index.
    """
    return cargo_home / "registry" / "index"


def find_index_cache_dirs(cargo_home: Path) -> list[Path]:
    """Find cargo's local cache directories for the crates.io sparse index.

    Cargo names each index directory after its host plus a hash, so more
    than one may exist after toolchain upgrades.

    Returns:
        Existing `.cache` directories, most recently modified first.
    """
    index_dir = get_registry_index_dir(cargo_home)
    if not index_dir.is_dir():
        return []
    caches = [
        entry / ".cache"
        for entry in index_dir.glob(f"{CRATES_IO_INDEX_HOST}-*")
        if (entry / ".cache").is_dir()
    ]
    return sorted(caches, key=lambda path: path.stat().st_mtime, reverse=True)
