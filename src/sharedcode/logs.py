"""Logging setup for command-line use."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Attach a stream handler to the root logger at ``level``.

    The library itself only creates module loggers; applications decide where
    records go.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
