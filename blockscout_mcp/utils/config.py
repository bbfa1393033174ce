"""
config.py

This module contains global configuration parameters loaded from environment variables.
It ensures centralized management of key configurations used across different modules.

All configuration values are loaded from environment variables with sensible defaults.
"""

import os


class Config:
    """
    Configuration class that loads all settings from environment variables.

    Attributes:
        CHAIN_REGISTRY_URL (str): Base URL of the chain registry (no trailing slash).
        REQUEST_TIMEOUT (float): The timeout for outbound HTTP requests in seconds.
        USER_AGENT (str): User-Agent header sent with outbound requests.
        MCP_TRANSPORT (str): Tool surface transport, 'stdio' or 'http'.
        HTTP_HOST (str): Bind address for the HTTP surface.
        HTTP_PORT (int): Bind port for the HTTP surface.
        ENVIRONMENT (str): The application environment (e.g., 'development', 'production').
        LOG_LEVEL (str): The logging level for the application.
        LOG_DIR (str): Directory that receives the log file. Empty disables file logging.
        SENTRY_DSN (str): The DSN for Sentry error tracking.
        SENTRY_ENABLED (bool): A flag to enable or disable Sentry.
        SENTRY_ENVIRONMENT (str): The Sentry environment.
        SENTRY_TRACES_SAMPLE_RATE (float): The traces sample rate for Sentry.
    """

    VALID_TRANSPORTS = ("stdio", "http")

    def __init__(self):
        # Registry / explorer access
        self.CHAIN_REGISTRY_URL = os.getenv(
            "CHAIN_REGISTRY_URL", "https://chains.blockscout.com"
        ).rstrip("/")
        self.REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
        self.USER_AGENT = os.getenv("USER_AGENT", "blockscout-mcp/0.1.0")

        # Tool surface
        self.MCP_TRANSPORT = os.getenv("MCP_TRANSPORT", "stdio").lower()
        self.HTTP_HOST = os.getenv("HTTP_HOST", "0.0.0.0")
        self.HTTP_PORT = int(os.getenv("HTTP_PORT", "8000"))

        # Environment Settings
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_DIR = os.getenv("LOG_DIR", "logs")

        # Sentry Configuration
        self.SENTRY_DSN = os.getenv("SENTRY_DSN", "")
        self.SENTRY_ENABLED = os.getenv("SENTRY_ENABLED", "false").lower() == "true"
        self.SENTRY_ENVIRONMENT = os.getenv("SENTRY_ENVIRONMENT", self.ENVIRONMENT)
        self.SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "1.0"))

    def validate(self) -> bool:
        """
        Validates that the configuration values are usable.

        Returns:
            bool: True if the configuration is valid.

        Raises:
            ValueError: If a configuration value is missing or invalid.
        """
        errors = []

        if not self.CHAIN_REGISTRY_URL.startswith(("http://", "https://")):
            errors.append("CHAIN_REGISTRY_URL must be an http(s) URL")

        if self.REQUEST_TIMEOUT <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")

        if self.MCP_TRANSPORT not in self.VALID_TRANSPORTS:
            errors.append(f"MCP_TRANSPORT must be one of {', '.join(self.VALID_TRANSPORTS)}")

        if not 0 < self.HTTP_PORT < 65536:
            errors.append("HTTP_PORT must be between 1 and 65535")

        if self.SENTRY_ENABLED and not self.SENTRY_DSN:
            errors.append("SENTRY_DSN is required when SENTRY_ENABLED is true")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        return True


# Global configuration instance
_config = None


def get_config() -> Config:
    """
    Gets the global configuration instance.

    The configuration is loaded only once and the same instance is returned
    on subsequent calls.

    Returns:
        Config: The global configuration object.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drops the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
