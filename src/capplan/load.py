"""Daily load computation and load status classification."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from .dates import is_weekend, is_within_range, parse_day
from .logger import debug_enabled, get_logger
from .models import Percent

if TYPE_CHECKING:
    from .store import EntityStore

logger = get_logger()

# Load above this share of capacity (but not above capacity) is a warning
DEFAULT_WARNING_RATIO = 0.9


class LoadStatus(str, Enum):
    """Utilization band of a resource on one day."""

    RED = "red"  # load > capacity
    YELLOW = "yellow"  # capacity * warning_ratio < load <= capacity
    GREEN = "green"  # load <= capacity * warning_ratio


def get_load_status(
    load: float, capacity: float, warning_ratio: float = DEFAULT_WARNING_RATIO
) -> LoadStatus:
    """Classify a load against a capacity.

    Both comparisons are strict: a load exactly at capacity is yellow, a load
    exactly at the warning threshold is green.
    """
    if load > capacity:
        return LoadStatus.RED
    if load > capacity * warning_ratio:
        return LoadStatus.YELLOW
    return LoadStatus.GREEN


@dataclass(frozen=True)
class DailyLoad:
    """Load of one resource on one day."""

    day: date
    load: Percent
    capacity: Percent
    status: LoadStatus


class LoadEngine:
    """Computes per-resource, per-day load from the current entity store.

    Nothing is cached: each query walks the store as it is at call time, so
    results always reflect the latest mutations.
    """

    def __init__(
        self, store: EntityStore, warning_ratio: float = DEFAULT_WARNING_RATIO
    ) -> None:
        self.store = store
        self.warning_ratio = warning_ratio

    def get_resource_load(self, resource_id: str, day: date | datetime | str) -> Percent:
        """Return the summed effort demanded of a resource on a day.

        Weekends always return 0. Otherwise every assignment of the resource on
        a task whose range contains the day contributes its effort. The result
        may exceed the resource's capacity.
        """
        target = parse_day(day)
        if is_weekend(target):
            return 0

        total: Percent = 0
        for task in self.store.all_tasks:
            if not is_within_range(target, task.start, task.end):
                continue
            # Every matching assignment counts, duplicates from imports included
            for assignment in task.assignments:
                if assignment.resource_id == resource_id:
                    total += assignment.effort
                    if debug_enabled():
                        logger.debug(
                            f"      {resource_id} on {target}: +{assignment.effort} "
                            f"from task {task.id}"
                        )
        return total

    def get_load_status(self, load: float, capacity: float) -> LoadStatus:
        """Classify a load using this engine's warning ratio."""
        return get_load_status(load, capacity, self.warning_ratio)

    def get_daily_loads(self, resource_id: str, days: Iterable[date]) -> list[DailyLoad]:
        """Compute load and status for a resource over the given days.

        Returns an empty list for an unknown resource.
        """
        resource = self.store.find_resource(resource_id)
        if resource is None:
            return []

        result: list[DailyLoad] = []
        for day in days:
            load = self.get_resource_load(resource_id, day)
            result.append(
                DailyLoad(
                    day=day,
                    load=load,
                    capacity=resource.capacity,
                    status=self.get_load_status(load, resource.capacity),
                )
            )
        return result
