"""Abstract base class for package operators.

This module defines the Operator interface that performs the real
install, update and uninstall side effects, and the error raised when
such an operation fails.
"""

from abc import ABC, abstractmethod

from semver import Version

from capctl.models.action import Action, ActionResult, ActionType


class ActuatorError(RuntimeError):
    """Raised when a package operation exits unsuccessfully.

    Attributes:
        result: The failed action result.
        stderr: Standard error captured from the operation.
    """

    def __init__(self, result: ActionResult) -> None:
        self.result = result
        self.stderr = (result.error or "").strip()
        action = result.action
        message = f"Failed to {action.action_type.value} package {action.package}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators run one action at a time and block until it completes.

    Example:
        >>> operator = CargoOperator()
        >>> if operator.is_available():
        ...     result = operator.uninstall("ripgrep")
        ...     print(result.success)
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying package manager can be used.

        Returns:
            True if the package manager is installed, False otherwise.
        """

    @abstractmethod
    def install(
        self,
        package: str,
        version: Version | None = None,
        *,
        locked: bool = False,
        forced: bool = False,
        nightly: bool = False,
    ) -> ActionResult:
        """Install a package.

        Args:
            package: Package name.
            version: Version resolved from the registry, for reporting.
            locked: Build with the package's lockfile.
            forced: Overwrite an existing installation.
            nightly: Build with the nightly toolchain.

        Returns:
            ActionResult describing the outcome.
        """

    @abstractmethod
    def update(
        self,
        package: str,
        local_version: Version,
        target_version: Version,
        *,
        locked: bool = False,
    ) -> ActionResult:
        """Reinstall a package at a target version.

        Returns:
            ActionResult describing the outcome.
        """

    @abstractmethod
    def uninstall(self, package: str) -> ActionResult:
        """Uninstall a package.

        Returns:
            ActionResult describing the outcome.
        """

    def execute(self, action: Action) -> ActionResult:
        """Execute a single action.

        Dispatches to install, update or uninstall based on the action type.

        Args:
            action: Action to execute.

        Returns:
            ActionResult for the action.

        Raises:
            RuntimeError: If the package manager is not available.
        """
        if not self.is_available():
            msg = "Package manager is not available"
            raise RuntimeError(msg)

        if action.action_type == ActionType.INSTALL:
            return self.install(
                action.package,
                action.version,
                locked=action.locked,
                forced=action.forced,
                nightly=action.nightly,
            )
        if action.action_type == ActionType.UPDATE:
            if action.version is None or action.previous_version is None:
                msg = f"Update of {action.package} needs both versions"
                raise ValueError(msg)
            return self.update(
                action.package,
                action.previous_version,
                action.version,
                locked=action.locked,
            )
        return self.uninstall(action.package)
