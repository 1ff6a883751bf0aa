"""CLI package for capctl.

This package contains the Typer application and all subcommands.
"""

from capctl.cli.main import app

__all__ = ["app"]
