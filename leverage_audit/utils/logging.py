"""
Logging Setup

Engine modules only call logging.getLogger(__name__); the CLI configures the
root logger once, here, with a rich console handler.

Usage:
    from leverage_audit.utils.logging import setup_logging
    setup_logging('DEBUG')
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"
DATE_FORMAT = "[%X]"


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Configure root logging once; LOG_LEVEL is used when no level is given."""
    level = (level or os.getenv('LOG_LEVEL', 'WARNING')).upper()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # Keep transport chatter out of the CLI output
    logging.getLogger('urllib3').setLevel(max(logging.WARNING, root.level))