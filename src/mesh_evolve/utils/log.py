"""Logger setup for scripts and the command line."""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logger(name: str = "mesh_evolve", log_path: Optional[Path] = None) -> logging.Logger:
    """Set up a logger that writes to the console and, optionally, a file.

    Library modules log through children of ``mesh_evolve``, so configuring
    that name captures everything the package emits.

    Args:
        name: Logger name.
        log_path: If given, also append DEBUG and above to this file.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers.clear()

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    return logger
