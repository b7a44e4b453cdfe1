"""Logging helpers for the Priors Survey."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:^7} | {file.name}:{line} | {message}"


def configure_logger(source: str, logs_dir: Path = Path("logs")) -> Path:
    """Configure Loguru logging for a given surface (widget, api, cli, ...).

    Returns the templated log path so callers can report where logs go.
    """
    logger.remove()

    # Console handler: ERROR and above
    logger.add(sink=sys.stderr, level="ERROR", format=LOG_FORMAT)

    # File handler: DEBUG+, rotated daily, keep 7 days, zipped
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"{source}_{'{time:YYYYMMDD}'}.log"

    logger.add(
        sink=str(log_path),
        level="DEBUG",
        format=LOG_FORMAT,
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )

    logger.info(
        f"Logger configured for source '{source}'. "
        f"Sinks: stderr (level=ERROR+), file (level=DEBUG+) at '{log_path}'."
    )
    return log_path


def add_console_sink(verbosity: int) -> None:
    """Echo INFO (verbosity 1) or DEBUG (2+) to stderr; 0 adds nothing."""
    if verbosity <= 0:
        return
    logger.add(
        sys.stderr,
        level="DEBUG" if verbosity > 1 else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>",
    )


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (uvicorn, gradio, httpx) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def intercept_stdlib_logging(level: int = logging.INFO) -> None:
    """Route everything logged through the stdlib `logging` module to loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=level, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
