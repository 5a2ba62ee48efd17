"""Exceptions raised by the Music Sheets infrastructure layer."""


class MusicSheetsError(Exception):
    """Base exception for Music Sheets."""


class ConfigError(MusicSheetsError):
    """Configuration file is unreadable or holds invalid values."""


class StoreError(MusicSheetsError):
    """A durable store read, write or delete failed."""

    def __init__(self, operation: str, key: str, message: str):
        self.operation = operation
        self.key = key
        super().__init__(f"Store {operation} failed for key '{key}': {message}")
