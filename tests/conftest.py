"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from capctl.core.inventory import PackageInventory
from capctl.models.action import (
    Action,
    ActionResult,
    create_install_action,
    create_uninstall_action,
    create_update_action,
)
from capctl.models.package import Package, PackageExecutable
from capctl.operators.base import Operator
from capctl.registry.base import PackageNotFoundError, Registry, RegistryEntry
from semver import Version


class FakeRegistry(Registry):
    """In-memory registry serving fixed latest versions."""

    def __init__(self, versions: dict[str, str]) -> None:
        self.versions = {name: Version.parse(vers) for name, vers in versions.items()}
        self.lookups: list[str] = []

    @property
    def display_name(self) -> str:
        return "fake registry"

    def get_latest_version(self, name: str) -> Version:
        self.lookups.append(name)
        if name not in self.versions:
            raise PackageNotFoundError(name, self.display_name)
        return self.versions[name]

    def search(self, pattern: str) -> list[RegistryEntry]:
        return sorted(
            RegistryEntry(name, version)
            for name, version in self.versions.items()
            if pattern in name
        )


class RecordingOperator(Operator):
    """Operator that records calls and fails for selected packages."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple] = []

    def is_available(self) -> bool:
        return True

    def _result(self, action: Action) -> ActionResult:
        if action.package in self.failing:
            return ActionResult(action=action, success=False, error="error: build failed")
        return ActionResult(action=action, success=True, message="Operation completed")

    def install(self, package, version=None, *, locked=False, forced=False, nightly=False):
        self.calls.append(("install", package, version, locked, forced, nightly))
        return self._result(
            create_install_action(package, version, locked=locked, forced=forced, nightly=nightly)
        )

    def update(self, package, local_version, target_version, *, locked=False):
        self.calls.append(("update", package, local_version, target_version, locked))
        return self._result(
            create_update_action(package, local_version, target_version, locked=locked)
        )

    def uninstall(self, package):
        self.calls.append(("uninstall", package))
        return self._result(create_uninstall_action(package))


@pytest.fixture
def sample_inventory() -> PackageInventory:
    """Inventory with foo 1.2.0 (executable foo), bar 0.5.0 and baz 2.0.0."""
    return PackageInventory(
        [
            Package("foo", Version.parse("1.2.0"), (PackageExecutable("foo"),)),
            Package("bar", Version.parse("0.5.0"), (PackageExecutable("bar"),)),
            Package("baz", Version.parse("2.0.0"), (PackageExecutable("baz"),)),
        ]
    )


@pytest.fixture
def fake_registry() -> FakeRegistry:
    """Registry where foo is ahead, bar is current and baz is unknown."""
    return FakeRegistry({"foo": "1.3.0", "bar": "0.5.0"})


@pytest.fixture
def recording_operator() -> RecordingOperator:
    """Operator that succeeds for every package."""
    return RecordingOperator()


@pytest.fixture
def crates_toml() -> str:
    """Sample cargo install metadata."""
    return """[v1]
"ripgrep 14.1.0 (registry+https://github.com/rust-lang/crates.io-index)" = ["rg"]
"fd-find 9.0.0 (registry+https://github.com/rust-lang/crates.io-index)" = ["fd"]
"cargo-edit 0.12.2 (registry+https://github.com/rust-lang/crates.io-index)" = [
    "cargo-add",
    "cargo-rm",
    "cargo-set-version",
    "cargo-upgrade",
]
"""


@pytest.fixture
def cargo_home(tmp_path: Path, crates_toml: str) -> Path:
    """Cargo home directory with install metadata and a bin directory."""
    home = tmp_path / "cargo"
    (home / "bin").mkdir(parents=True)
    (home / ".crates.toml").write_text(crates_toml)
    return home
