"""High-level planner service."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from .config import PlannerConfig
from .load import DailyLoad, LoadEngine, LoadStatus
from .logger import get_logger
from .models import Percent, Task
from .overload import Overload, OverloadDetector
from .storage import StoragePersister, default_snapshot, load_snapshot
from .store import EntityStore

if TYPE_CHECKING:
    from .storage import KeyValueStore

logger = get_logger()


class CapacityPlanner:
    """Query interface over an entity store.

    This service ties together:
    - EntityStore (the canonical entity graph and its mutations)
    - LoadEngine (per-resource daily load)
    - OverloadDetector (per-task overload)

    Mutations go through ``planner.store``; queries always see the latest
    state.
    """

    def __init__(self, store: EntityStore, config: PlannerConfig | None = None) -> None:
        self.store = store
        self.config = config or PlannerConfig()
        self.engine = LoadEngine(store, warning_ratio=self.config.load.warning_ratio)
        self.detector = OverloadDetector(store, self.engine)

    @classmethod
    def open(cls, kv: KeyValueStore, config: PlannerConfig | None = None) -> CapacityPlanner:
        """Load saved state from a key-value store and keep it saved.

        Falls back to seed data when nothing (or nothing readable) is saved.
        Every subsequent applied mutation writes the state back.
        """
        config = config or PlannerConfig()
        snapshot = load_snapshot(kv, config.storage.key)
        if snapshot is None:
            logger.changes("No saved state found, starting from seed data")
            snapshot = default_snapshot()
        store = EntityStore.from_snapshot(snapshot)
        store.subscribe(StoragePersister(kv, config.storage.key))
        return cls(store, config)

    @property
    def all_tasks(self) -> list[Task]:
        return self.store.all_tasks

    def get_resource_load(self, resource_id: str, day: date | datetime | str) -> Percent:
        return self.engine.get_resource_load(resource_id, day)

    def get_load_status(self, load: float, capacity: float) -> LoadStatus:
        return self.engine.get_load_status(load, capacity)

    def is_task_overloaded(self, task_id: str) -> bool:
        return self.detector.is_task_overloaded(task_id)

    def find_overloads(self, task_id: str) -> list[Overload]:
        return self.detector.find_overloads(task_id)

    def resource_report(self, days: Iterable[date]) -> dict[str, list[DailyLoad]]:
        """Daily loads for every resource over the given days, keyed by resource id."""
        day_list = list(days)
        return {
            resource.id: self.engine.get_daily_loads(resource.id, day_list)
            for resource in self.store.resources
        }
