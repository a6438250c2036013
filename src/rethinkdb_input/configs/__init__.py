from .plugin import PluginTask, DEFAULT_PORT, DEFAULT_COLUMN_NAME, dump_task
from .loader import load_raw_config
from .secrets import SecretManager, secret_manager

__all__ = [
    "PluginTask",
    "DEFAULT_PORT",
    "DEFAULT_COLUMN_NAME",
    "dump_task",
    "load_raw_config",
    "SecretManager",
    "secret_manager",
]
