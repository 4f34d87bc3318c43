"""Logging helpers for applications embedding the availability engine.

The library itself only creates module loggers; nothing is configured on
import. ``setup_logging`` attaches a Rich console handler to the package
logger for callers that want readable output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PROJECT_LOGGER = "availabilityfinder"


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode the handler is set to DEBUG
    and includes timestamps, logger names and source locations.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting.
        color: Enable color output when True.

    Returns:
        RichHandler: Configured handler.
    """
    console = Console(color_system="auto" if color else None, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=debug_mode,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = "%(message)s" if not debug_mode else "%(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt=fmt))

    return handler


def setup_logging(
    level: int | str = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Attach a console handler to the package logger.

    Calling this again replaces the previously attached Rich handler instead
    of stacking a second one.

    Args:
        level: Level name (e.g. "INFO") or number.
        debug_mode: See `config_console_handler`.
        color: See `config_console_handler`.

    Returns:
        RichHandler: The handler now attached to the package logger.
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logger = logging.getLogger(PROJECT_LOGGER)
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)

    handler = config_console_handler(level=level, debug_mode=debug_mode, color=color)
    logger.addHandler(handler)
    logger.setLevel(handler.level)

    return handler
