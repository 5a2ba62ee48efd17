"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Durable key-value stores (memory, SQLite)
- Logging (Loguru) and console output (Rich)
"""

# Configuration
from .config import (
    Config,
    LoggingConfig,
    SheetsConfig,
    StorageConfig,
    load_config,
    parse_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_database_path,
    get_log_file_path,
    create_default_config,
)

# Errors
from .exceptions import MusicSheetsError, ConfigError, StoreError

# Stores
from .store import DurableStore, MemoryStore, SqliteStore, create_store

# Output
from .output import setup_loguru
from .console import get_console, print_error, print_success

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "SheetsConfig",
    "StorageConfig",
    "load_config",
    "parse_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_database_path",
    "get_log_file_path",
    "create_default_config",
    # Errors
    "MusicSheetsError",
    "ConfigError",
    "StoreError",
    # Stores
    "DurableStore",
    "MemoryStore",
    "SqliteStore",
    "create_store",
    # Output
    "setup_loguru",
    "get_console",
    "print_error",
    "print_success",
]
