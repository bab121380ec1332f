"""
Configuration tests for Valkey connections and memoization settings.
"""

import logging
from unittest.mock import patch

import pytest

from valkey_memo.cache import ValkeyConfig, ValkeyConfigurationError
from valkey_memo.utils import config as memo_config
from valkey_memo.utils import MemoSettings, configure_logging, get_config, load_config, reset_config


class TestValkeyConfig:
    """Test Valkey configuration functionality."""

    def test_config_creation_with_defaults(self):
        """Test creating config with default values."""
        config = ValkeyConfig()
        assert config.host == "localhost"
        assert config.port == 6379
        assert config.database == 0
        assert config.max_connections == 10
        assert config.socket_timeout == 5.0

    def test_config_from_env(self):
        """Test creating config from environment variables."""
        with patch.dict('os.environ', {
            'VALKEY_HOST': 'test-host',
            'VALKEY_PORT': '6380',
            'VALKEY_PASSWORD': 'test-pass',
            'VALKEY_DATABASE': '5',
            'VALKEY_MAX_CONNECTIONS': '20',
            'VALKEY_RETRY_ON_TIMEOUT': 'false',
        }):
            config = ValkeyConfig.from_env()
            assert config.host == "test-host"
            assert config.port == 6380
            assert config.password == "test-pass"
            assert config.database == 5
            assert config.max_connections == 20
            assert config.retry_on_timeout is False

    def test_config_from_env_invalid_number(self):
        """Test unparseable numbers raise a configuration error."""
        with patch.dict('os.environ', {'VALKEY_PORT': 'not-a-port'}):
            with pytest.raises(ValkeyConfigurationError):
                ValkeyConfig.from_env()

    def test_config_to_connection_kwargs(self):
        """Test converting config to connection parameters."""
        config = ValkeyConfig(
            host="test-host",
            port=6380,
            password="test-pass",
            database=5
        )

        kwargs = config.to_connection_kwargs()
        assert kwargs["host"] == "test-host"
        assert kwargs["port"] == 6380
        assert kwargs["password"] == "test-pass"
        assert kwargs["db"] == 5
        assert "max_connections" not in kwargs

    def test_no_password_kwarg_without_password(self):
        """Test the password is omitted when unset."""
        assert "password" not in ValkeyConfig().to_connection_kwargs()

    def test_config_to_connection_pool_kwargs(self):
        """Test converting config to connection pool parameters."""
        config = ValkeyConfig(max_connections=15)
        kwargs = config.to_connection_pool_kwargs()
        assert kwargs["max_connections"] == 15

    def test_config_string_representation(self):
        """Test config string representation hides password."""
        config = ValkeyConfig(password="secret123")
        config_str = str(config)
        assert "secret123" not in config_str
        assert "***" in config_str


class TestMemoSettings:
    """Test application-level memoization settings."""

    @pytest.fixture(autouse=True)
    def fresh_config(self):
        reset_config()
        yield
        reset_config()

    def test_defaults(self):
        """Test default settings."""
        settings = MemoSettings()
        assert settings.default_ttl_seconds == 3600
        assert settings.key_prefix == "memo"
        assert settings.strict_reads is False
        assert settings.log_level == "INFO"

    def test_log_level_normalized(self):
        """Test log levels are upper-cased."""
        assert MemoSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValueError):
            MemoSettings(log_level="LOUD")

    def test_negative_ttl_rejected(self):
        """Test the default TTL must be non-negative."""
        with pytest.raises(ValueError):
            MemoSettings(default_ttl_seconds=-5)

    def test_prefix_with_whitespace_rejected(self):
        """Test prefixes cannot contain whitespace."""
        with pytest.raises(ValueError):
            MemoSettings(key_prefix="my prefix")

    def test_load_config_from_env(self, tmp_path):
        """Test loading settings from environment variables."""
        with patch.dict('os.environ', {
            'MEMO_DEFAULT_TTL': '900',
            'MEMO_KEY_PREFIX': 'weather',
            'MEMO_STRICT_READS': 'yes',
            'MEMO_LOG_LEVEL': 'warning',
        }):
            settings = load_config(env_file=str(tmp_path / "missing.env"))

        assert settings.default_ttl_seconds == 900
        assert settings.key_prefix == "weather"
        assert settings.strict_reads is True
        assert settings.log_level == "WARNING"

    def test_load_config_from_env_file(self, tmp_path, monkeypatch):
        """Test values are picked up from a .env file."""
        monkeypatch.delenv("MEMO_DEFAULT_TTL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("MEMO_DEFAULT_TTL=120\n")

        settings = load_config(env_file=str(env_file))

        assert settings.default_ttl_seconds == 120
        monkeypatch.delenv("MEMO_DEFAULT_TTL", raising=False)

    def test_load_config_invalid(self, tmp_path):
        """Test invalid values surface as ValueError."""
        with patch.dict('os.environ', {'MEMO_DEFAULT_TTL': 'soon'}):
            with pytest.raises(ValueError, match="Configuration validation failed"):
                load_config(env_file=str(tmp_path / "missing.env"))

    def test_get_config_is_cached(self, tmp_path, monkeypatch):
        """Test the global configuration is loaded once."""
        monkeypatch.chdir(tmp_path)

        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first

    def test_configure_logging(self, monkeypatch):
        """Test the configured level is handed to basicConfig."""
        calls = []
        monkeypatch.setattr(memo_config.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("debug")

        assert calls[0]["level"] == logging.DEBUG

    def test_configure_logging_rejects_unknown_level(self, monkeypatch):
        """Test an unknown level is a ValueError, not an AttributeError."""
        calls = []
        monkeypatch.setattr(memo_config.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        with pytest.raises(ValueError, match="Log level must be one of"):
            configure_logging("loud")

        assert calls == []
