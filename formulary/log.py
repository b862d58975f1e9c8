"""Logging for the ``rit`` CLI.

Prompts and command results own stdout, so every log line goes to stderr.
At the default WARNING level a line is just ``level: message``.  With
``--verbose`` each filesystem step is logged with a timestamp and the
function that performed it.

Records from libraries using stdlib ``logging`` are forwarded to loguru so
both end up in the same stream.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_BRIEF_FORMAT = "<level>{level}</level>: {message}"
_VERBOSE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
    "<cyan>{name}:{function}</cyan> {message}"
)


class _InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so the caller is reported
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "WARNING") -> None:
    """Send log output to stderr at ``level``.

    DEBUG switches to the verbose format.  Called once per invocation by the
    ``rit`` group callback.
    """
    level = level.upper()
    verbose = logger.level(level).no <= logger.level("DEBUG").no

    logger.remove()
    logger.add(sys.stderr, level=level, format=_VERBOSE_FORMAT if verbose else _BRIEF_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=logging.DEBUG if verbose else logging.WARNING, force=True)
