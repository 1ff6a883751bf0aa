"""Action models for package operations.

This module defines data structures for representing package management
actions (install, update, uninstall) and their execution results.
"""

from dataclasses import dataclass
from enum import Enum

from semver import Version


class ActionType(Enum):
    """Type of package management action.

    Attributes:
        INSTALL: Install a package from the registry.
        UPDATE: Reinstall a package at a newer version.
        UNINSTALL: Remove a package and its executables.
    """

    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"


@dataclass(frozen=True, slots=True)
class Action:
    """Represents a single package management action to be executed.

    Attributes:
        action_type: The type of action.
        package: Name of the package to operate on.
        version: Target version (resolved latest for install, target for update).
        previous_version: Installed version being replaced (update only).
        locked: Build with the package's own lockfile.
        forced: Overwrite an existing installation.
        nightly: Build with the nightly toolchain.
    """

    action_type: ActionType
    package: str
    version: Version | None = None
    previous_version: Version | None = None
    locked: bool = False
    forced: bool = False
    nightly: bool = False

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.action_type == ActionType.UPDATE and self.version is None:
            msg = f"Update of {self.package} requires a target version"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a package management action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Captured standard error if the action failed.
    """

    action: Action
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success


def create_install_action(
    package: str,
    version: Version | None = None,
    *,
    locked: bool = False,
    forced: bool = False,
    nightly: bool = False,
) -> Action:
    """Create an install action for a package.

    Args:
        package: Name of the package to install.
        version: Version resolved from the registry, if known.
        locked: Build with the package's lockfile.
        forced: Overwrite an existing installation.
        nightly: Build with the nightly toolchain.

    Returns:
        Action configured for installation.
    """
    return Action(
        action_type=ActionType.INSTALL,
        package=package,
        version=version,
        locked=locked,
        forced=forced,
        nightly=nightly,
    )


def create_update_action(
    package: str,
    previous_version: Version,
    version: Version,
    *,
    locked: bool = False,
) -> Action:
    """Create an update action moving a package to a target version."""
    return Action(
        action_type=ActionType.UPDATE,
        package=package,
        version=version,
        previous_version=previous_version,
        locked=locked,
    )


def create_uninstall_action(package: str, version: Version | None = None) -> Action:
    """Create an uninstall action for a package."""
    return Action(action_type=ActionType.UNINSTALL, package=package, previous_version=version)
