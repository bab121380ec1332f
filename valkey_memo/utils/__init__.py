from .config import MemoSettings, load_config, get_config, reset_config, configure_logging

__all__ = [
    "MemoSettings",
    "load_config",
    "get_config",
    "reset_config",
    "configure_logging",
]
