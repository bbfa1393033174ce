"""
Utilities Module

This module provides configuration management, logging and Sentry integration.
"""

from blockscout_mcp.utils.config import get_config
from blockscout_mcp.utils.logger import get_logger
from blockscout_mcp.utils.sentry import (
    init_sentry,
    capture_exception,
    add_breadcrumb,
    close_sentry
)

__all__ = [
    'get_config',
    'get_logger',
    'init_sentry',
    'capture_exception',
    'add_breadcrumb',
    'close_sentry'
]
