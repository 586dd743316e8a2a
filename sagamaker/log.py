"""Logging setup for the Saga Maker application."""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from sagamaker.database import get_data_dir

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_log_path() -> Path:
    return get_data_dir() / "sagamaker.log"


def setup_logging(level: Optional[str] = None, log_path: Optional[Path] = None) -> None:
    """Configure the root logger once, for the application entry point only.

    The level comes from ``SAGAMAKER_LOG_LEVEL`` unless given explicitly.
    """
    level_name = (level or os.environ.get("SAGAMAKER_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)

    handler = RotatingFileHandler(
        log_path or get_log_path(),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
