"""Unit tests for path management.

Tests for XDG config paths and cargo directory resolution.
"""

import os
from pathlib import Path
from unittest.mock import patch

from capctl.core.paths import (
    APP_NAME,
    find_index_cache_dirs,
    get_cargo_bin_dir,
    get_cargo_home,
    get_config_dir,
    get_crates_manifest_path,
    get_settings_path,
    get_user_theme_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_file_paths(self, tmp_path: Path) -> None:
        """Settings and theme live in the config dir."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_settings_path() == tmp_path / APP_NAME / "config.toml"
            assert get_user_theme_path() == tmp_path / APP_NAME / "theme.toml"


class TestCargoPaths:
    """Tests for cargo path resolution."""

    def test_override_wins(self, tmp_path: Path) -> None:
        """An explicit cargo home wins over the environment."""
        with patch.dict(os.environ, {"CARGO_HOME": "/env/cargo"}):
            assert get_cargo_home(tmp_path) == tmp_path

    def test_env_var(self) -> None:
        """CARGO_HOME is used when there is no override."""
        with patch.dict(os.environ, {"CARGO_HOME": "/env/cargo"}):
            assert get_cargo_home() == Path("/env/cargo")

    def test_default(self) -> None:
        """~/.cargo is the fallback."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_cargo_home() == Path.home() / ".cargo"

    def test_derived_paths(self, tmp_path: Path) -> None:
        """Bin dir and tracking file live in cargo home."""
        assert get_cargo_bin_dir(tmp_path) == tmp_path / "bin"
        assert get_crates_manifest_path(tmp_path) == tmp_path / ".crates.toml"


class TestFindIndexCacheDirs:
    """Tests for find_index_cache_dirs function."""

    def test_no_registry(self, tmp_path: Path) -> None:
        """A cargo home without registry has no cache."""
        assert find_index_cache_dirs(tmp_path) == []

    def test_most_recent_first(self, tmp_path: Path) -> None:
        """Cache dirs are ordered by modification time, newest first."""
        index = tmp_path / "registry" / "index"
        old = index / "index.crates.io-aaaa" / ".cache"
        new = index / "index.crates.io-bbbb" / ".cache"
        other = index / "github.com-cccc" / ".cache"
        for path in (old, new, other):
            path.mkdir(parents=True)
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))

        assert find_index_cache_dirs(tmp_path) == [new, old]
