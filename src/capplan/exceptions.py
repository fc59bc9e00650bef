"""Custom exceptions for capplan."""


class CapplanError(Exception):
    """Base exception for all capplan errors."""

    pass


class ConfigError(CapplanError):
    """Raised when the configuration file is missing or invalid."""

    pass


class StorageError(CapplanError):
    """Raised when the storage file cannot be read."""

    pass
