# What it does: Hands out per-module loggers and wires them to rich output on stderr
# How it does: Modules call get_logger(__name__) and log through the standard logging tree. The command line entry point calls setup_logging once, which puts a single RichHandler on the root logger. The level comes from the LOG_LEVEL environment variable when it is set
# What data structure it uses: The logging module's logger registry (a dictionary keyed by dotted module name)

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# Patch bytes go to stdout, so log records must never share it
console = Console(stderr=True)


def get_logger(name, level=None): # Returns the logger for a module, optionally pinning its level
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


def setup_logging(level="WARNING"):
    """
    Configures the root logger with a RichHandler.

    Call this once from the command line entry point. The library modules
    never attach handlers themselves, so embedding applications keep control
    of where records go.
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s"))
    root_logger.addHandler(rich_handler)
