"""Logging configuration for sgacrawl."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating file handler that keeps writing when rollover fails (e.g. a locked file)."""

    def shouldRollover(self, record: logging.LogRecord) -> int:  # noqa: N802
        try:
            return super().shouldRollover(record)
        except OSError:
            return 0

    def doRollover(self) -> None:  # noqa: N802
        try:
            super().doRollover()
        except OSError:
            if self.stream is None:
                self.stream = self._open()


def setup_logging(
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure logging to console and, when log_file is given, a rotating file."""
    logger = logging.getLogger("sgacrawl")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = SafeRotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
