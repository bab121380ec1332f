"""
Environment configuration loader with validation for memoized functions.
"""

import logging
import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class MemoSettings(BaseModel):
    """Defaults applied when memoizing functions from application code."""

    default_ttl_seconds: int = Field(
        default=3600, ge=0, description="TTL for cached results in seconds"
    )
    key_prefix: str = Field(
        default="memo", description="Namespace prepended to every cache key"
    )
    strict_reads: bool = Field(
        default=False,
        description="Fail instead of recomputing when the store cannot be read",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("key_prefix")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Key prefixes end up in Valkey keys, so no whitespace."""
        if any(char in v for char in (" ", "\n", "\r", "\t")):
            raise ValueError("Key prefix must not contain whitespace")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[str] = None) -> MemoSettings:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        MemoSettings: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    try:
        config_data: Dict[str, Any] = {
            "default_ttl_seconds": int(os.getenv("MEMO_DEFAULT_TTL", "3600")),
            "key_prefix": os.getenv("MEMO_KEY_PREFIX", "memo"),
            "strict_reads": _env_flag("MEMO_STRICT_READS", "false"),
            "log_level": os.getenv("MEMO_LOG_LEVEL", "INFO"),
        }
        return MemoSettings(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


# Global configuration instance
_config: Optional[MemoSettings] = None


def get_config() -> MemoSettings:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        MemoSettings: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts, defaulting to the configured level."""
    name = (level or get_config().log_level).upper()
    if name not in VALID_LOG_LEVELS:
        raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
    logging.basicConfig(
        level=getattr(logging, name),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
