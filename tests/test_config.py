"""
test_config.py

Tests for the config module including environment variable loading,
validation, and configuration management.
"""

import pytest
import os
from unittest.mock import patch

from blockscout_mcp.utils import config as config_module
from blockscout_mcp.utils.config import Config, get_config, reset_config


class TestConfigInitialization:
    """Tests for Config class initialization and environment variable loading"""

    def test_config_default_values(self):
        """Test that config initializes with default values when env vars are not set"""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

            # Registry / explorer access defaults
            assert config.CHAIN_REGISTRY_URL == "https://chains.blockscout.com"
            assert config.REQUEST_TIMEOUT == 30.0
            assert config.USER_AGENT.startswith("blockscout-mcp/")

            # Tool surface defaults
            assert config.MCP_TRANSPORT == "stdio"
            assert config.HTTP_HOST == "0.0.0.0"
            assert config.HTTP_PORT == 8000

            # Environment Settings defaults
            assert config.ENVIRONMENT == "development"
            assert config.LOG_LEVEL == "INFO"
            assert config.LOG_DIR == "logs"

            # Sentry Configuration defaults
            assert config.SENTRY_DSN == ""
            assert config.SENTRY_ENABLED is False
            assert config.SENTRY_ENVIRONMENT == "development"
            assert config.SENTRY_TRACES_SAMPLE_RATE == 1.0

    def test_config_loads_from_environment_variables(self):
        """Test that config correctly loads values from environment variables"""
        env_vars = {
            "CHAIN_REGISTRY_URL": "http://localhost:4000/",
            "REQUEST_TIMEOUT": "5.5",
            "USER_AGENT": "custom-agent",
            "MCP_TRANSPORT": "HTTP",
            "HTTP_HOST": "127.0.0.1",
            "HTTP_PORT": "9000",
            "ENVIRONMENT": "production",
            "LOG_LEVEL": "debug",
            "LOG_DIR": "/var/log/blockscout-mcp",
            "SENTRY_DSN": "https://key@sentry.io/1",
            "SENTRY_ENABLED": "true",
            "SENTRY_TRACES_SAMPLE_RATE": "0.25",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = Config()

            assert config.CHAIN_REGISTRY_URL == "http://localhost:4000"
            assert config.REQUEST_TIMEOUT == 5.5
            assert config.USER_AGENT == "custom-agent"
            assert config.MCP_TRANSPORT == "http"
            assert config.HTTP_HOST == "127.0.0.1"
            assert config.HTTP_PORT == 9000
            assert config.ENVIRONMENT == "production"
            assert config.LOG_LEVEL == "DEBUG"
            assert config.LOG_DIR == "/var/log/blockscout-mcp"
            assert config.SENTRY_DSN == "https://key@sentry.io/1"
            assert config.SENTRY_ENABLED is True
            assert config.SENTRY_ENVIRONMENT == "production"
            assert config.SENTRY_TRACES_SAMPLE_RATE == 0.25

    def test_sentry_environment_override(self):
        """Test that SENTRY_ENVIRONMENT can differ from ENVIRONMENT"""
        with patch.dict(os.environ, {"ENVIRONMENT": "production", "SENTRY_ENVIRONMENT": "canary"}, clear=True):
            assert Config().SENTRY_ENVIRONMENT == "canary"

    def test_invalid_numeric_value_raises(self):
        """Test that non-numeric values for numeric settings fail loudly"""
        with patch.dict(os.environ, {"HTTP_PORT": "eighty"}, clear=True):
            with pytest.raises(ValueError):
                Config()


class TestConfigValidation:
    """Tests for Config.validate()"""

    def test_defaults_are_valid(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config().validate() is True

    @pytest.mark.parametrize("env, message", [
        ({"CHAIN_REGISTRY_URL": "ftp://chains"}, "CHAIN_REGISTRY_URL"),
        ({"REQUEST_TIMEOUT": "0"}, "REQUEST_TIMEOUT"),
        ({"MCP_TRANSPORT": "websocket"}, "MCP_TRANSPORT"),
        ({"HTTP_PORT": "70000"}, "HTTP_PORT"),
        ({"SENTRY_ENABLED": "true"}, "SENTRY_DSN"),
    ])
    def test_invalid_values(self, env, message):
        """Test that each invalid setting is reported"""
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ValueError) as exc_info:
                Config().validate()

        assert "Configuration validation failed" in str(exc_info.value)
        assert message in str(exc_info.value)

    def test_all_errors_reported_together(self):
        with patch.dict(os.environ, {"REQUEST_TIMEOUT": "-1", "HTTP_PORT": "0"}, clear=True):
            with pytest.raises(ValueError) as exc_info:
                Config().validate()

        assert "REQUEST_TIMEOUT" in str(exc_info.value)
        assert "HTTP_PORT" in str(exc_info.value)


class TestConfigHelpers:
    """Tests for the global instance"""

    def test_get_config_returns_singleton(self):
        assert get_config() is get_config()

    def test_reset_config(self):
        original = get_config()
        try:
            reset_config()
            with patch.dict(os.environ, {"HTTP_PORT": "9999"}, clear=True):
                assert get_config().HTTP_PORT == 9999
            assert get_config() is not original
        finally:
            config_module._config = original
