"""Logging for astrosched: console via rich, optional log file, store event sink."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from astrosched.events import StoreEvent

LOGGER_NAME = "astrosched"

event_logger = logging.getLogger(f"{LOGGER_NAME}.events")


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """
    Configure the ``astrosched`` logger with:
    - Console handler: rich, on stderr, at ``level``
    - File handler (optional): everything from DEBUG up

    Safe to call more than once; previous handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    ch = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(fh)

    return logger


def log_event(event: StoreEvent) -> None:
    """Store listener that records events: warnings for rejections, info otherwise."""
    level = logging.WARNING if event.is_warning else logging.INFO
    event_logger.log(level, event.message)
