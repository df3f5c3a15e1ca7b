"""Shared utility functions for the transaction list sync engine."""

import logging
from datetime import UTC, date, datetime

import colorlog

LOGGER_NAMESPACE = "txnsync"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def set_log_level(level: int | str) -> None:
    """Apply a level to every logger already created under the project namespace."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.split(".")[0] == LOGGER_NAMESPACE:
            logger.setLevel(level)


def safe_cast(val: object, to_type: type, default: object = None) -> object:
    """Safely cast a value to a type, returning default on failure."""
    try:
        return to_type(val)
    except (ValueError, TypeError):
        return default


def current_month(today: date | None = None) -> str:
    """Return the calendar month of ``today`` (default: now) as ``YYYY-MM``."""
    today = today or datetime.now(UTC).date()
    return today.strftime("%Y-%m")
