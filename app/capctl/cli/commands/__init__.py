"""CLI commands for capctl.

This package contains all subcommand implementations.
"""

from capctl.cli.commands import config, install, list_, search, update

__all__ = ["config", "install", "list_", "search", "update"]
