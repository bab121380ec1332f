"""
Valkey connection configuration for memoized functions.

Connection settings are read from the environment (optionally via a .env
file). Nothing here opens a connection; clients built from this config
connect lazily on their first command.
"""

import os
import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


@dataclass
class ValkeyConfig:
    """
    Configuration class for Valkey connections with environment variable support.

    The socket timeouts are the only timeout behaviour memoized calls have;
    the wrapper itself never adds one.
    """

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 10
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    decode_responses: bool = True

    @classmethod
    def from_env(cls) -> "ValkeyConfig":
        """
        Create ValkeyConfig from environment variables.

        Returns:
            ValkeyConfig: Configuration instance with values from environment

        Raises:
            ValkeyConfigurationError: If a numeric variable cannot be parsed
        """
        try:
            return cls(
                host=os.getenv("VALKEY_HOST", "localhost"),
                port=int(os.getenv("VALKEY_PORT", "6379")),
                password=os.getenv("VALKEY_PASSWORD") or None,
                database=int(os.getenv("VALKEY_DATABASE", "0")),
                max_connections=int(os.getenv("VALKEY_MAX_CONNECTIONS", "10")),
                socket_timeout=float(os.getenv("VALKEY_SOCKET_TIMEOUT", "5.0")),
                socket_connect_timeout=float(os.getenv("VALKEY_SOCKET_CONNECT_TIMEOUT", "5.0")),
                retry_on_timeout=_env_flag("VALKEY_RETRY_ON_TIMEOUT", "true"),
                decode_responses=_env_flag("VALKEY_DECODE_RESPONSES", "true"),
            )
        except ValueError as e:
            raise ValkeyConfigurationError(f"Invalid Valkey environment setting: {e}") from e

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """
        Convert configuration to Valkey connection parameters.

        Returns:
            Dict[str, Any]: Connection parameters for Valkey client
        """
        kwargs = {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "retry_on_timeout": self.retry_on_timeout,
            "decode_responses": self.decode_responses,
        }

        if self.password:
            kwargs["password"] = self.password

        return kwargs

    def to_connection_pool_kwargs(self) -> Dict[str, Any]:
        """Connection kwargs plus the pool size."""
        kwargs = self.to_connection_kwargs()
        kwargs["max_connections"] = self.max_connections
        return kwargs

    def __str__(self) -> str:
        """String representation hiding sensitive information."""
        password_display = "***" if self.password else "None"
        return (
            f"ValkeyConfig(host={self.host}, port={self.port}, "
            f"db={self.database}, password={password_display}, "
            f"max_connections={self.max_connections})"
        )


class ValkeyMemoError(Exception):
    """Base exception for valkey_memo."""
    pass


class StoreUnavailableError(ValkeyMemoError):
    """Raised by strict memoized functions when the store cannot be read."""
    pass


class ValkeyConfigurationError(ValkeyMemoError):
    """Custom exception for Valkey configuration issues."""
    pass
