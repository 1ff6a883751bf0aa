"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from capctl.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def pluralize(singular: str, plural: str, count: int) -> str:
    """Pick the singular or plural form of a word for a count."""
    return singular if count == 1 else plural


def styled_package(name: str) -> str:
    """Return a package name with package markup.

    The name is escaped, so brackets in it are printed literally.
    """
    return f"[package]{escape(name)}[/]"


def create_search_table(title: str = "Search Results") -> Table:
    """Create a pre-configured table for registry search results.

    Args:
        title: Table title.

    Returns:
        Rich Table with Package, Latest and Installed columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", style="package", no_wrap=True)
    table.add_column("Latest", style="latest")
    table.add_column("Installed", style="version")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
