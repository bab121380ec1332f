"""
Valkey client construction.

Clients are created around a connection pool and are safe to share
between threads; no command is sent until the first read or write.
"""

import logging
from typing import Optional

import valkey
from valkey.connection import ConnectionPool

from .config import ValkeyConfig

logger = logging.getLogger(__name__)


def create_client(config: Optional[ValkeyConfig] = None) -> valkey.Valkey:
    """
    Build a pooled Valkey client without contacting the server.

    Args:
        config: ValkeyConfig instance, defaults to environment-based config

    Returns:
        valkey.Valkey: Client bound to a fresh connection pool
    """
    config = config or ValkeyConfig.from_env()
    logger.info(f"Creating Valkey client: {config}")

    pool = ConnectionPool(**config.to_connection_pool_kwargs())
    return valkey.Valkey(connection_pool=pool)


def close_client(client: valkey.Valkey) -> None:
    """Disconnect every pooled connection held by ``client``."""
    try:
        client.connection_pool.disconnect()
        logger.info("Disconnected from Valkey server")
    except Exception as e:
        logger.warning(f"Error during Valkey disconnect: {e}")
