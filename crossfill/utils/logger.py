"""Logging utilities shared by the engine, loader and CLI."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install a single stderr handler on the root logger at ``level``.

    ``level`` may be a number or a level name such as ``"DEBUG"``; cursor
    transitions are only visible at DEBUG.
    """

    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = numeric

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``crossfill`` namespace; configures defaults on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "crossfill")
