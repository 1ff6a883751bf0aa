"""Install, update and uninstall orchestration.

Turns inventory and reconciliation results into operator actions.
"Already installed", "not installed" and "not available" are reported and
return normally; a failed operation raises :class:`ActuatorError`.
"""

from __future__ import annotations

import logging

from capctl.core.inventory import PackageInventory
from capctl.core.reconcile import VersionReconciler
from capctl.models.action import (
    ActionResult,
    create_install_action,
    create_uninstall_action,
    create_update_action,
)
from capctl.models.package import PackageWithStatus
from capctl.operators.base import ActuatorError, Operator
from capctl.registry.base import Registry, RegistryError
from capctl.utils.formatting import console, pluralize, styled_package

logger = logging.getLogger(__name__)

# Command suggested when an update fails to build
LOCKED_RETRY_HINT = "capctl update --locked {name}"


class PackageOrchestrator:
    """Drives the package operator from inventory and registry state.

    Attributes:
        registry: Registry used to resolve versions.
        inventory: Installed packages.
        operator: Operator performing the side effects.
        reconciler: Version reconciler sharing the same registry and inventory.
    """

    def __init__(
        self,
        registry: Registry,
        inventory: PackageInventory,
        operator: Operator,
    ) -> None:
        self.registry = registry
        self.inventory = inventory
        self.operator = operator
        self.reconciler = VersionReconciler(registry, inventory)

    def install(
        self,
        name: str,
        *,
        locked: bool = False,
        forced: bool = False,
        nightly: bool = False,
    ) -> ActionResult | None:
        """Install a package from the registry.

        Args:
            name: Package name.
            locked: Build with the package's lockfile.
            forced: Install even if already installed.
            nightly: Build with the nightly toolchain.

        Returns:
            The successful result, or None if nothing was done.

        Raises:
            ActuatorError: If the installation failed.
        """
        if not forced:
            local_package = self.inventory.get(name)
            if local_package is not None:
                console.print(
                    f"Package {styled_package(local_package.name)} is "
                    "[success]already installed[/]."
                )
                return None

        try:
            latest_version = self.registry.get_latest_version(name)
        except RegistryError as e:
            logger.debug("Lookup of %s failed: %s", name, e)
            console.print(
                f"Package {styled_package(name)} is "
                f"[error]not available on {self.registry.display_name}[/]."
            )
            return None

        action = create_install_action(
            name, latest_version, locked=locked, forced=forced, nightly=nightly
        )
        result = self.operator.execute(action)

        if result.failed:
            console.print(
                f"[error]Failed[/] to install package {styled_package(name)} "
                f"[version]{latest_version}[/]."
            )
            raise ActuatorError(result)

        console.print(f"[success]Installed[/] {styled_package(name)} [version]{latest_version}[/].")
        return result

    def uninstall(self, name: str) -> ActionResult | None:
        """Uninstall an installed package.

        Returns:
            The successful result, or None if the package is not installed.

        Raises:
            ActuatorError: If the removal failed.
        """
        local_package = self.inventory.get(name)
        if local_package is None:
            console.print(f"Package {styled_package(name)} is [error]not installed[/].")
            return None

        console.print(
            f"Uninstalling package {styled_package(name)} [version]{local_package.version}[/]."
        )
        result = self.operator.execute(create_uninstall_action(name, local_package.version))

        if result.failed:
            console.print(f"[error]Failed[/] to uninstall package {styled_package(name)}.")
            raise ActuatorError(result)

        console.print(f"[success]Uninstalled[/] {styled_package(name)}.")
        return result

    def update_one(self, name: str, *, locked: bool = False) -> ActionResult | None:
        """Update a single package if it is out of date.

        Args:
            name: Package name.
            locked: Build with the package's lockfile.

        Returns:
            The successful result, or None if no update was needed or possible.

        Raises:
            ActuatorError: If the update failed.
        """
        checked = self.reconciler.check_one(name)
        if checked is None or not checked.is_out_of_date:
            return None

        try:
            return self._update(checked, locked=locked)
        except ActuatorError:
            console.print(
                f"You may need to run [muted]{LOCKED_RETRY_HINT.format(name=checked.name)}[/]."
            )
            raise

    def update_all(self, *, locked: bool = False) -> list[ActionResult]:
        """Update every out-of-date package, one at a time.

        Stops at the first failure.

        Args:
            locked: Build with each package's lockfile.

        Returns:
            Results of the successful updates.

        Raises:
            ActuatorError: On the first failed update.
        """
        outdated = self.reconciler.check_all()
        if outdated is None:
            return []

        count = len(outdated)
        console.print(
            f"[success]Updating[/] {count} {pluralize('package', 'packages', count)}..."
        )

        return [self._update(entry, locked=locked) for entry in outdated]

    def _update(self, entry: PackageWithStatus, *, locked: bool) -> ActionResult:
        """Run the update of one out-of-date package and report it."""
        target = entry.latest_version
        if target is None:
            msg = f"No target version known for {entry.name}"
            raise ValueError(msg)

        local = entry.package.version
        action = create_update_action(entry.name, local, target, locked=locked)
        result = self.operator.execute(action)

        if result.failed:
            console.print(f"[error]Failed[/] to update package {styled_package(entry.name)}.")
            raise ActuatorError(result)

        console.print(
            f"[success]Updated[/] {styled_package(entry.name)} from "
            f"[version]{local}[/] to [latest]{target}[/]."
        )
        return result
