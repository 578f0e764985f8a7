"""Logging helpers for console output and per-run debug traces."""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = [
    "setup_logging",
    "configure_debug_file_logger",
    "close_debug_logger",
]

_DUMP_MARKER = "_jsrefactor_debug_dump"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for command line use."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_debug_file_logger(
    name: str,
    path: Path,
    *,
    level: int = logging.DEBUG,
    formatter: logging.Formatter | None = None,
) -> logging.Logger:
    """Return a logger writing debug traces to ``path``.

    Any previously configured debug handlers on ``name`` are removed so repeated
    invocations replace earlier traces instead of appending to them.  The file
    is opened in text mode with UTF-8 encoding.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    _remove_dump_handlers(logger)

    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    setattr(handler, _DUMP_MARKER, True)
    if formatter is None:
        formatter = logging.Formatter("%(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def close_debug_logger(logger: logging.Logger) -> None:
    """Tear down debug handlers installed by :func:`configure_debug_file_logger`."""

    _remove_dump_handlers(logger)


def _remove_dump_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _DUMP_MARKER, False):
            logger.removeHandler(handler)
            handler.close()
