"""Logging for the inspection pipeline and the uvicorn server that hosts it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

_LOGGER_NAME = "gitinspect"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

CONSOLE_FORMAT = "[gitinspect] %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under ``gitinspect`` (``gitinspect.llm``, ``gitinspect.service``...)."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console and optional file handlers on the ``gitinspect`` logger.

    Debug level (``-v`` or ``DEBUG=true``) also turns on full tracebacks for
    failed analyses. ``log_file`` comes from ``--log-file`` and is appended to.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls replace handlers instead of stacking them.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def route_server_logs(names: Iterable[str] = SERVER_LOGGERS) -> None:
    """Send uvicorn's own loggers through the ``gitinspect`` handlers.

    Call after :func:`configure_logging` and start uvicorn with
    ``log_config=None`` so it keeps these handlers.
    """
    root = logging.getLogger(_LOGGER_NAME)
    for name in names:
        server_logger = logging.getLogger(name)
        for handler in list(server_logger.handlers):
            server_logger.removeHandler(handler)
        for handler in root.handlers:
            server_logger.addHandler(handler)
        server_logger.setLevel(root.level)
        server_logger.propagate = False


__all__ = ["SERVER_LOGGERS", "configure_logging", "get_logger", "route_server_logs"]
