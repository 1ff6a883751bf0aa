"""Data models for capctl.

This module exports the core data structures used throughout the application.
"""

from capctl.models.action import (
    Action,
    ActionResult,
    ActionType,
    create_install_action,
    create_uninstall_action,
    create_update_action,
)
from capctl.models.package import (
    ExecutableMap,
    Package,
    PackageExecutable,
    PackageKey,
    PackageStatus,
    PackageWithStatus,
    classify,
    merge_executable_maps,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "ExecutableMap",
    "Package",
    "PackageExecutable",
    "PackageKey",
    "PackageStatus",
    "PackageWithStatus",
    "classify",
    "create_install_action",
    "create_uninstall_action",
    "create_update_action",
    "merge_executable_maps",
]
