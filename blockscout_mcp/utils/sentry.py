"""
sentry.py

This module handles Sentry integration for error tracking.
It provides functions to initialize Sentry and capture tool failures.

Sentry integration is optional and controlled by environment variables.
"""

from typing import Optional

import sentry_sdk

from blockscout_mcp import __version__
from blockscout_mcp.utils.config import get_config
from blockscout_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Global flag to track if Sentry is initialized
_sentry_initialized = False


def init_sentry() -> bool:
    """
    Initializes the Sentry SDK for error tracking.

    Sentry is not initialized if it is disabled or the DSN is not provided.

    Returns:
        bool: True if Sentry was successfully initialized, False otherwise.
    """
    global _sentry_initialized

    if _sentry_initialized:
        logger.info("Sentry already initialized")
        return True

    config = get_config()

    if not config.SENTRY_ENABLED:
        logger.info("Sentry is disabled via configuration")
        return False

    if not config.SENTRY_DSN:
        logger.warning("Sentry is enabled but DSN is not configured")
        return False

    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=config.SENTRY_TRACES_SAMPLE_RATE,
            release=f"blockscout-mcp@{__version__}",
            attach_stacktrace=True,
            send_default_pii=False,
        )
        _sentry_initialized = True
        logger.info(f"Sentry initialized successfully for environment: {config.SENTRY_ENVIRONMENT}")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def capture_exception(error: Exception, context: Optional[dict] = None) -> Optional[str]:
    """
    Captures an exception and sends it to Sentry.

    Args:
        error (Exception): The exception to capture.
        context (Optional[dict]): Additional context, one Sentry context per key.

    Returns:
        Optional[str]: The event ID if the exception was sent, None otherwise.
    """
    if not _sentry_initialized:
        logger.debug("Sentry not initialized, skipping exception capture")
        return None

    try:
        if context:
            with sentry_sdk.new_scope() as scope:
                for key, value in context.items():
                    scope.set_context(key, value)
                event_id = sentry_sdk.capture_exception(error)
        else:
            event_id = sentry_sdk.capture_exception(error)

        logger.debug(f"Exception captured by Sentry with event ID: {event_id}")
        return event_id
    except Exception as e:
        logger.error(f"Failed to capture exception in Sentry: {e}")
        return None


def add_breadcrumb(message: str, category: str = 'default',
                   level: str = 'info', data: Optional[dict] = None) -> None:
    """
    Adds a breadcrumb to Sentry for better error context.

    Args:
        message (str): The breadcrumb message.
        category (str): The category of the breadcrumb. Defaults to 'default'.
        level (str): The severity level of the breadcrumb. Defaults to 'info'.
        data (Optional[dict]): Additional data. Defaults to None.
    """
    if not _sentry_initialized:
        return

    try:
        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data or {}
        )
    except Exception as e:
        logger.error(f"Failed to add breadcrumb in Sentry: {e}")


def close_sentry(timeout: int = 2) -> None:
    """
    Flushes and closes the Sentry client.

    Args:
        timeout (int): Seconds to wait for pending events to be sent. Defaults to 2.
    """
    global _sentry_initialized

    if not _sentry_initialized:
        logger.debug("Sentry not initialized, nothing to close")
        return

    try:
        sentry_sdk.flush(timeout=timeout)
        _sentry_initialized = False
        logger.info("Sentry client closed")
    except Exception as e:
        logger.error(f"Failed to close Sentry client: {e}")
