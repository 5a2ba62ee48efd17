"""
Configuration management for Music Sheets
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from .exceptions import ConfigError

VALID_BACKENDS = {"sqlite", "memory"}
VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class StorageConfig:
    """Configuration for the durable key-value store."""

    backend: str = "sqlite"  # 'sqlite' or 'memory'
    database_path: Optional[str] = None  # Default: ~/.local/share/music-sheets/music_sheets.db

    def validate(self) -> None:
        """Validate storage configuration values.

        Raises:
            ConfigError: If the backend is unknown
        """
        if self.backend not in VALID_BACKENDS:
            raise ConfigError(
                f"Invalid storage backend: {self.backend!r}. "
                f"Valid backends are: {sorted(VALID_BACKENDS)}"
            )


@dataclass
class SheetsConfig:
    """Configuration for sheet defaults."""

    default_title: str = "我喜欢"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    log_file: Optional[str] = None  # Default: ~/.local/share/music-sheets/music-sheets.log
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False

    def validate(self) -> None:
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.level!r}")
        if self.max_file_size_mb <= 0:
            raise ConfigError("max_file_size_mb must be positive")


@dataclass
class Config:
    """Main configuration object."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.storage.validate()
        self.logging.validate()


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "music-sheets"
    return Path.home() / ".config" / "music-sheets"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/music-sheets (or ~/.config/music-sheets)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "music-sheets"
    return Path.home() / ".local" / "share" / "music-sheets"


def get_database_path(config: Config) -> Path:
    """Resolve the SQLite database file for a configuration."""
    if config.storage.database_path:
        return Path(config.storage.database_path).expanduser()
    return get_data_dir() / "music_sheets.db"


def get_log_file_path(config: Config) -> Path:
    """Resolve the log file for a configuration."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "music-sheets.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Music Sheets Configuration

[storage]
# Storage backend: "sqlite" (persistent) or "memory" (lost on exit)
backend = "sqlite"

# SQLite database file (default: ~/.local/share/music-sheets/music_sheets.db)
# database_path = "/path/to/music_sheets.db"

[sheets]
# Title of the built-in favorites sheet
default_title = "我喜欢"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/music-sheets/music-sheets.log)
# log_file = "/path/to/custom/music-sheets.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, falling back to defaults."""
    config = Config()

    if "storage" in toml_data:
        storage_data = toml_data["storage"]
        config.storage = StorageConfig(
            backend=storage_data.get("backend", config.storage.backend),
            database_path=storage_data.get("database_path"),
        )

    if "sheets" in toml_data:
        sheets_data = toml_data["sheets"]
        config.sheets = SheetsConfig(
            default_title=sheets_data.get(
                "default_title", config.sheets.default_title
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def _apply_env_overrides(config: Config) -> Config:
    database_path = os.environ.get("MUSIC_SHEETS_DATABASE_PATH")
    if database_path:
        config.storage.database_path = database_path

    log_level = os.environ.get("MUSIC_SHEETS_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - MUSIC_SHEETS_DATABASE_PATH
    - MUSIC_SHEETS_LOG_LEVEL

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e
        config = parse_config(toml_data)

    config = _apply_env_overrides(config)
    config.validate()
    return config

