"""
logger.py

This module provides centralized logging functionality for the application. It ensures
that all modules have consistent and structured logging. Logs are written to stderr
and, unless disabled, to a file for long-term storage and analysis.

stdout is reserved for the MCP stdio transport, so no handler ever writes there.
An empty LOG_DIR turns the file handler off.
"""

import logging
import os
import sys

from blockscout_mcp.utils.config import get_config


def get_logger(name: str) -> logging.Logger:
    """
    Configures and returns a logger instance with the specified name.

    :param name: The name of the logger, typically the module name.
    :return: Configured logger instance.
    """
    config = get_config()
    level = getattr(logging, config.LOG_LEVEL, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Ensure no duplicate handlers are added
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        log_directory = config.LOG_DIR
        if log_directory:
            os.makedirs(log_directory, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(log_directory, "app.log"))
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        logger.propagate = False

    return logger
