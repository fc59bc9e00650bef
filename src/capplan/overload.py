"""Detection of tasks that take part in a resource overload.

A task is overloaded when, on any day it spans, any resource it assigns has a
total load (across all tasks) above that resource's capacity. Adding work to
a resource elsewhere can therefore make an untouched task overloaded.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from .dates import iter_days
from .load import LoadEngine, LoadStatus
from .logger import checks_enabled, get_logger
from .models import Percent

if TYPE_CHECKING:
    from .models import Task
    from .store import EntityStore

logger = get_logger()


@dataclass(frozen=True)
class Overload:
    """A day on which a resource assigned to a task is over capacity."""

    task_id: str
    resource_id: str
    day: date
    load: Percent
    capacity: Percent


class OverloadDetector:
    """Answers per-task overload queries on top of a LoadEngine."""

    def __init__(self, store: EntityStore, engine: LoadEngine) -> None:
        self.store = store
        self.engine = engine

    def is_task_overloaded(self, task_id: str) -> bool:
        """Return True if any assigned resource is red on any day of the task.

        Unknown task ids and assignments to deleted resources are skipped
        rather than treated as errors. Stops at the first red day.
        """
        task = self.store.find_task(task_id)
        if task is None:
            logger.checks(f"Task {task_id}: not found, not overloaded")
            return False

        for _ in self._iter_overloads(task):
            return True
        return False

    def find_overloads(self, task_id: str) -> list[Overload]:
        """List every (day, resource) overload a task takes part in."""
        task = self.store.find_task(task_id)
        if task is None:
            return []
        return list(self._iter_overloads(task))

    def overloaded_task_ids(self) -> list[str]:
        """Ids of all overloaded tasks, in epic and task display order."""
        return [task.id for task in self.store.all_tasks if self.is_task_overloaded(task.id)]

    def _iter_overloads(self, task: Task) -> Iterator[Overload]:
        # Weekends are walked too; they always load 0.
        for day in iter_days(task.start, task.end):
            for assignment in task.assignments:
                resource = self.store.find_resource(assignment.resource_id)
                if resource is None:
                    if checks_enabled():
                        logger.checks(
                            f"  {task.id} on {day}: resource {assignment.resource_id} "
                            "no longer exists, skipping"
                        )
                    continue

                load = self.engine.get_resource_load(resource.id, day)
                status = self.engine.get_load_status(load, resource.capacity)
                if checks_enabled():
                    logger.checks(
                        f"  {task.id} on {day}: {resource.id} at {load}/{resource.capacity} "
                        f"({status.value})"
                    )
                if status == LoadStatus.RED:
                    yield Overload(
                        task_id=task.id,
                        resource_id=resource.id,
                        day=day,
                        load=load,
                        capacity=resource.capacity,
                    )
