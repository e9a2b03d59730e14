"""
Logging configuration for the generation pipeline.

Usage in generator modules:
    from routergen.gen_logging import get_logger
    logger = get_logger(__name__)

The root logger name is "routergen.gen". Levels are controlled by the CLI.
"""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "routergen.gen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the routergen.gen hierarchy.

    "routergen.context_builder" becomes "routergen.gen.context_builder".
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_gen_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the routergen.gen logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG   (per-entity decisions)
        (default)       -> INFO    (phase summaries)
        --quiet / -q    -> WARNING (warnings and errors only)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Replace rather than add: sys.stderr may have been swapped since the last call
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_GenFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _GenFormatter(logging.Formatter):
    """Emit the message with a level tag for anything above INFO."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno > logging.INFO:
            return f"[{record.levelname.lower()}] {message}"
        return message
