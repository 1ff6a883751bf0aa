"""Centralised logging setup for capctl.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where records go and at which level.
"""

import logging

from rich.logging import RichHandler

from capctl.utils.formatting import err_console

_CONFIGURED = False


def configure_logging(verbose: bool = False) -> None:
    """Route capctl log records to stderr through Rich.

    Calling this more than once only adjusts the level.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    global _CONFIGURED
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger("capctl")
    root.setLevel(level)

    if _CONFIGURED:
        return

    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    _CONFIGURED = True
