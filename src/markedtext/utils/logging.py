"""Logging helpers for the markedtext command line and library."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_logger", "get_log_path"]

_LOG_DIR_ENV = "MARKEDTEXT_LOG_DIR"
_LOG_FILE_NAME = "markedtext.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int = logging.WARNING,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path | None:
    """Configure root logging with a console handler and an optional rotating file.

    A file handler is only attached when ``log_dir`` is given or
    ``MARKEDTEXT_LOG_DIR`` is set. Returns the log file path, if any.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force:
        return _LOG_PATH

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    target_dir = _resolve_log_dir(log_dir)
    if target_dir is not None:
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / _LOG_FILE_NAME
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger."""

    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the currently configured log file if available."""

    return _LOG_PATH


def _resolve_log_dir(log_dir: Path | str | None) -> Path | None:
    candidate = log_dir or os.environ.get(_LOG_DIR_ENV)
    if not candidate:
        return None
    return Path(candidate).expanduser()
