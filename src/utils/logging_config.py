"""
Logging configuration for the vocabulary exercise engine.

Console logging by default, plus an optional rotating log file.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

try:
    from ..config import config
except ImportError:
    from src.config import config


def setup_logging(
    log_level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_console: bool = True,
) -> Optional[Path]:
    """
    Configure logging for the engine's loggers.

    Args:
        log_level: Logging level name (default from config.logging.log_level)
        log_dir: Directory for a rotating log file; defaults to
            config.paths.logs_dir when config.logging.log_to_file is set
        enable_console: Whether to log to stdout

    Returns:
        Path to the log file, or None when logging to console only
    """
    level_name = (log_level or config.logging.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    if log_dir is None and config.logging.log_to_file:
        log_dir = config.paths.logs_dir

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers filter
    root_logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(fmt="%(levelname)-8s - %(message)s"))
        root_logger.addHandler(console_handler)

    log_path = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"{config.logging.log_file_prefix}_{timestamp}.log"

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s - %(levelname)-8s - %(name)s:%(lineno)d - %(funcName)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug("Logging initialized (level=%s, file=%s)", level_name, log_path)
    return log_path
