"""
Logging Configuration
Sets up the package logger for paraprim.
"""
import logging
import sys
from typing import Optional, Union

from .config import load_settings


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'paraprim' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, or a name such as "DEBUG").
               Defaults to ``log_level`` from the settings file.
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = load_settings().log_level
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"unknown log level: {level}")
        level = numeric

    logger = logging.getLogger("paraprim")
    logger.setLevel(level)

    # Drop handlers from an earlier call so records are not duplicated
    if logger.handlers:
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
