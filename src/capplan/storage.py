"""Key-value persistence for the planner state.

The whole entity graph is stored as one JSON text blob under a single key.
Storage is a cache of the in-memory state: write failures are logged and
never undo a mutation.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from .config import STORAGE_KEY
from .exceptions import StorageError
from .logger import get_logger
from .models import Assignment, Epic, Resource, Snapshot, Task

if TYPE_CHECKING:
    from .store import EntityStore

logger = get_logger()


class KeyValueStore(Protocol):
    """Minimal string key-value storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process key-value store."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items) if items else {}

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileKeyValueStore:
    """Key-value store kept as a JSON object in a single file.

    The file is rewritten as a whole on every change, via a temporary file in
    the same directory that then replaces the old file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            Path(tmp_name).replace(self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)


def load_snapshot(kv: KeyValueStore, key: str = STORAGE_KEY) -> Snapshot | None:
    """Read the saved snapshot, or None if there is none or it is corrupt."""
    saved = kv.get_item(key)
    if saved is None:
        return None
    try:
        return Snapshot.model_validate_json(saved)
    except ValidationError as e:
        logger.error(f"Failed to parse saved state under {key!r}: {e}")
        return None


class StoragePersister:
    """Change callback that writes the store's state to a key-value store."""

    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.kv = kv
        self.key = key

    def __call__(self, store: EntityStore) -> None:
        try:
            self.kv.set_item(self.key, store.export_state())
        except (OSError, StorageError) as e:
            logger.error(f"Failed to save state under {self.key!r}: {e}")


def default_snapshot() -> Snapshot:
    """Seed data used when nothing has been saved yet.

    t1 and t2 overlap on r1, which is booked at 105% on 2026-01-19 and
    2026-01-20.
    """
    return Snapshot(
        resources=[
            Resource(id="r1", name="Alex Rivera", capacity=100, color="#6366f1"),
            Resource(id="r2", name="Sarah Chen", capacity=80, color="#10b981"),
        ],
        epics=[
            Epic(
                id="e1",
                title="2026 Q1 Infrastructure",
                color="#6366f1",
                tasks=[
                    Task(
                        id="t1",
                        epic_id="e1",
                        name="Server Migration",
                        start=date(2026, 1, 10),
                        end=date(2026, 1, 20),
                        assignments=[Assignment(task_id="t1", resource_id="r1", effort=75)],
                    ),
                    Task(
                        id="t2",
                        epic_id="e1",
                        name="Database Optimization",
                        start=date(2026, 1, 17),
                        end=date(2026, 2, 20),
                        assignments=[
                            Assignment(task_id="t2", resource_id="r1", effort=30),
                            Assignment(task_id="t2", resource_id="r2", effort=50),
                        ],
                    ),
                ],
            )
        ],
        milestones=[],
        app_name="My Project",
    )
