"""Pytest configuration and fixtures for capplan tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest

from capplan.load import LoadEngine
from capplan.logger import reset_logger
from capplan.models import Assignment, Epic, Resource, Task
from capplan.overload import OverloadDetector
from capplan.storage import MemoryKeyValueStore, default_snapshot
from capplan.store import EntityStore


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Reset the capplan logger before and after each test for isolation."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def store() -> EntityStore:
    """Store holding the seed data (r1/r2, t1 and t2 overlapping on r1)."""
    return EntityStore.from_snapshot(default_snapshot())


@pytest.fixture
def engine(store: EntityStore) -> LoadEngine:
    return LoadEngine(store)


@pytest.fixture
def detector(store: EntityStore, engine: LoadEngine) -> OverloadDetector:
    return OverloadDetector(store, engine)


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


def make_task(
    task_id: str,
    start: date,
    end: date,
    *efforts: tuple[str, float],
    epic_id: str = "e1",
) -> Task:
    """Create a task with (resource_id, effort) assignments.

    Example:
        make_task("t9", date(2026, 3, 2), date(2026, 3, 6), ("r1", 50))
    """
    return Task(
        id=task_id,
        epic_id=epic_id,
        name=f"Task {task_id}",
        start=start,
        end=end,
        assignments=[
            Assignment(task_id=task_id, resource_id=resource_id, effort=effort)
            for resource_id, effort in efforts
        ],
    )


def make_store(*tasks: Task, resources: list[Resource] | None = None) -> EntityStore:
    """Create a store with one epic 'e1' holding the given tasks.

    Defaults to a single resource r1 with capacity 100.
    """
    if resources is None:
        resources = [Resource(id="r1", name="Alex", capacity=100)]
    return EntityStore(
        resources=resources,
        epics=[Epic(id="e1", title="Epic", tasks=list(tasks))],
    )
