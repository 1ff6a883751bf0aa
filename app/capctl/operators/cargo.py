"""Cargo package operator implementation.

Executes package installation, update and removal using ``cargo install``
and ``cargo uninstall``.
"""

import logging

from semver import Version

from capctl.models.action import (
    Action,
    ActionResult,
    create_install_action,
    create_uninstall_action,
    create_update_action,
)
from capctl.operators.base import Operator
from capctl.utils.formatting import console
from capctl.utils.shell import CommandResult, command_exists, run_streaming

logger = logging.getLogger(__name__)


class CargoOperator(Operator):
    """Operator for packages installed with ``cargo install``.

    Cargo's build output is shown live; its standard error is captured and
    attached to failed results. Operations block until cargo exits.
    """

    def __init__(self, cargo_command: str = "cargo") -> None:
        """Initialize the operator.

        Args:
            cargo_command: Cargo executable to run.
        """
        self._cargo = cargo_command

    def is_available(self) -> bool:
        """Check if cargo is available."""
        return command_exists(self._cargo)

    def install(
        self,
        package: str,
        version: Version | None = None,
        *,
        locked: bool = False,
        forced: bool = False,
        nightly: bool = False,
    ) -> ActionResult:
        """Install a package using ``cargo install``.

        Cargo resolves the version itself; ``version`` is only reported.
        """
        args = [self._cargo]
        if nightly:
            args.append("+nightly")
        args.append("install")
        if forced:
            args.append("--force")
        if locked:
            args.append("--locked")
        args.append(package)

        action = create_install_action(
            package, version, locked=locked, forced=forced, nightly=nightly
        )
        label = f"{package} {version}" if version is not None else package
        return self._run(action, args, f"Installing package [package]{label}[/]...")

    def update(
        self,
        package: str,
        local_version: Version,
        target_version: Version,
        *,
        locked: bool = False,
    ) -> ActionResult:
        """Reinstall a package at the target version with ``cargo install --force``."""
        args = [self._cargo, "install", "--force"]
        if locked:
            args.append("--locked")
        args.extend(["--version", str(target_version), package])

        action = create_update_action(package, local_version, target_version, locked=locked)
        return self._run(
            action,
            args,
            f"Updating package [package]{package}[/] from "
            f"[version]{local_version}[/] to [latest]{target_version}[/]...",
        )

    def uninstall(self, package: str) -> ActionResult:
        """Remove a package using ``cargo uninstall``."""
        action = create_uninstall_action(package)
        return self._run(
            action,
            [self._cargo, "uninstall", package],
            f"Uninstalling package [package]{package}[/]...",
        )

    def _run(self, action: Action, args: list[str], status: str) -> ActionResult:
        """Run a cargo command under a status spinner.

        Args:
            action: The action being performed.
            args: Full cargo command line.
            status: Rich markup shown next to the spinner.

        Returns:
            ActionResult for the action.
        """
        logger.info("Executing: %s", " ".join(args))

        try:
            with console.status(status):
                result = run_streaming(args)
        except OSError as e:
            logger.debug("Failed to start %s: %s", self._cargo, e)
            result = CommandResult(stdout="", stderr=str(e), returncode=127)

        if result.success:
            return ActionResult(action=action, success=True, message="Operation completed")

        error_msg = result.stderr.strip() or f"cargo exited with status {result.returncode}"
        return ActionResult(action=action, success=False, error=error_msg)
