# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Logging configuration for the draftgen command-line tool."""

from __future__ import annotations

import logging
from collections.abc import Callable

from yachalk import chalk

# ###############
# Public Interface
# ###############

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name for terminal output."""

    COLORS: dict[str, Callable[[str], str]] = {
        "DEBUG": chalk.cyan,
        "INFO": chalk.green,
        "WARNING": chalk.yellow,
        "ERROR": chalk.red,
        "CRITICAL": chalk.magenta,
    }

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color is None or not formatted.startswith(record.levelname):
            return formatted
        return color(record.levelname) + formatted[len(record.levelname) :]


def setup_logging(level: str | int = logging.INFO, *, use_colors: bool = True) -> None:
    """Install a single stream handler on the ``draftgen`` logger.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Level name (e.g. ``"DEBUG"``) or number.
        use_colors: Colour the level names.
    """
    logger = logging.getLogger("draftgen")
    for handler in [h for h in logger.handlers if getattr(h, _MARKER, False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter(LOG_FORMAT) if use_colors else logging.Formatter(LOG_FORMAT))
    setattr(handler, _MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)


# ################
# Implementation
# ################

_MARKER = "_draftgen_handler"
