"""Tests for the CapacityPlanner service."""

from datetime import date

from capplan.config import LoadConfig, PlannerConfig, StorageConfig
from capplan.load import LoadStatus
from capplan.models import Resource, Snapshot
from capplan.planner import CapacityPlanner
from capplan.storage import MemoryKeyValueStore, load_snapshot
from capplan.store import EntityStore


class TestOpen:
    def test_seed_data_when_nothing_saved(self, kv: MemoryKeyValueStore) -> None:
        planner = CapacityPlanner.open(kv)
        assert [t.id for t in planner.all_tasks] == ["t1", "t2"]
        # Nothing is written until something changes
        assert kv.items == {}

    def test_loads_saved_state(self, kv: MemoryKeyValueStore) -> None:
        saved = Snapshot(
            resources=[Resource(id="x", name="X", capacity=50)], epics=[], app_name="Saved"
        )
        kv.set_item("gantt_capacity_planner_v1", saved.to_json())
        planner = CapacityPlanner.open(kv)
        assert planner.store.app_name == "Saved"
        assert planner.all_tasks == []

    def test_mutations_are_persisted(self, kv: MemoryKeyValueStore) -> None:
        planner = CapacityPlanner.open(kv)
        planner.store.delete_resource("r1")

        reopened = CapacityPlanner.open(kv)
        assert reopened.store.find_resource("r1") is None
        assert not reopened.is_task_overloaded("t1")

    def test_uses_configured_key(self, kv: MemoryKeyValueStore) -> None:
        config = PlannerConfig(storage=StorageConfig(key="custom"))
        planner = CapacityPlanner.open(kv, config)
        planner.store.update_app_name("Custom")
        assert load_snapshot(kv, "custom") is not None
        assert load_snapshot(kv) is None


class TestQueries:
    def test_query_interface(self, store: EntityStore) -> None:
        planner = CapacityPlanner(store)
        assert planner.get_resource_load("r1", date(2026, 1, 19)) == 105
        assert planner.get_load_status(105, 100) == LoadStatus.RED
        assert planner.is_task_overloaded("t1")
        assert len(planner.find_overloads("t2")) == 2

    def test_configured_warning_ratio(self, store: EntityStore) -> None:
        planner = CapacityPlanner(store, PlannerConfig(load=LoadConfig(warning_ratio=0.5)))
        assert planner.get_load_status(75, 100) == LoadStatus.YELLOW

    def test_resource_report(self, store: EntityStore) -> None:
        planner = CapacityPlanner(store)
        days = [date(2026, 1, 16), date(2026, 1, 17), date(2026, 1, 18), date(2026, 1, 19)]
        report = planner.resource_report(days)
        assert list(report) == ["r1", "r2"]
        assert [d.load for d in report["r1"]] == [75, 0, 0, 105]
        assert [d.status for d in report["r2"]] == [LoadStatus.GREEN] * 4
