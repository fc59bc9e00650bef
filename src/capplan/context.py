"""Global application context and state management."""

from __future__ import annotations

from pathlib import Path


class _Context:
    """Application context for managing global state."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.store_path: Path | None = None


# Singleton instance
_context = _Context()


def get_config_path() -> Path | None:
    """Get the global config path."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the global config path."""
    _context.config_path = path


def get_store_path() -> Path | None:
    """Get the storage file override, if any."""
    return _context.store_path


def set_store_path(path: Path | None) -> None:
    """Set the storage file override."""
    _context.store_path = path
