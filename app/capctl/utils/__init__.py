"""Utility modules for capctl.

This module exports commonly used utility functions.
"""

from capctl.utils.formatting import (
    console,
    create_search_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from capctl.utils.shell import CommandResult, command_exists, run_command, run_streaming

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_search_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_streaming",
]
