"""
Run log files for Kometa Images.

Each run writes create_images.log next to the previous runs' logs, which are
rotated to create_images.log.1 ... create_images.log.N.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .constants import logger, LOG_FILE_NAME, LOG_KEEP

FILE_FORMAT = '[%(asctime)s] | %(levelname)-8s | %(message)s'


def setup_file_logging(log_dir: Path, keep: int = LOG_KEEP) -> RotatingFileHandler:
    """Attach a fresh run log to the package logger, rotating older ones."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME
    had_previous = log_path.exists() and log_path.stat().st_size > 0

    handler = RotatingFileHandler(
        log_path,
        backupCount=max(keep, 0),
        encoding='utf-8',
        delay=True,
    )
    if had_previous and keep > 0:
        handler.doRollover()
    elif had_previous:
        log_path.unlink()

    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    handler.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.info(f"LOG_FILE path={log_path}")
    return handler


def close_file_logging(handler: RotatingFileHandler) -> None:
    """Detach and close a handler returned by setup_file_logging."""
    logger.removeHandler(handler)
    handler.close()
