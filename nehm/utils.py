"""
Shared utility functions for nehm.

This module provides common utility functions used across the codebase.
"""

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(text: str) -> str:
    """
    Make a string safe to use as a file name.

    Characters that are invalid in file names on common platforms are
    replaced with "-", and leading/trailing dots and spaces are removed.

    Args:
        text: Raw text (e.g. "Artist - Title")

    Returns:
        Sanitized file name
    """
    text = _UNSAFE_CHARS.sub("-", text)
    return text.strip(". ")


def get_config_path() -> Path:
    """
    Get the config file path from environment variable or default.

    Reads the NEHM_CONFIG_PATH environment variable and returns a Path object
    for the config file. If the environment variable is not set, defaults to
    `~/.nehmconfig`. Nothing is created on disk.

    Returns:
        Path object pointing to the config file
    """
    config_path_str = os.getenv("NEHM_CONFIG_PATH")
    if config_path_str:
        return Path(config_path_str).expanduser()
    return Path.home() / ".nehmconfig"


def setup_logging(log_level: str) -> None:
    """Apply the configured log level to the root logger."""
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {log_level!r}, using INFO")
        level = logging.INFO
    logging.getLogger().setLevel(level)
