"""Tests for data models."""

from datetime import date

import pytest
from pydantic import ValidationError

from capplan.models import Assignment, Milestone, Resource, Snapshot, Task


class TestWireFormat:
    def test_camel_case_aliases(self) -> None:
        task = Task.model_validate(
            {
                "id": "t1",
                "epicId": "e1",
                "name": "Server Migration",
                "start": "2026-01-10",
                "end": "2026-01-20",
                "assignments": [{"taskId": "t1", "resourceId": "r1", "effort": 75}],
            }
        )
        assert task.epic_id == "e1"
        assert task.start == date(2026, 1, 10)
        assert task.assignments[0].resource_id == "r1"

    def test_snake_case_names_accepted(self) -> None:
        assignment = Assignment(task_id="t1", resource_id="r1", effort=30)
        assert assignment.model_dump(by_alias=True) == {
            "taskId": "t1",
            "resourceId": "r1",
            "effort": 30,
        }

    def test_percentages_keep_their_type(self) -> None:
        assert isinstance(Resource(id="r1", name="A", capacity=100).capacity, int)
        assert Resource(id="r1", name="A", capacity=62.5).capacity == 62.5

    def test_resource_requires_capacity(self) -> None:
        with pytest.raises(ValidationError):
            Resource.model_validate({"id": "r1", "name": "A"})

    def test_milestone_date(self) -> None:
        milestone = Milestone.model_validate({"id": "m1", "date": "2026-03-31", "label": "Q1"})
        assert milestone.date == date(2026, 3, 31)

    def test_snapshot_json_omits_unset_fields(self) -> None:
        snapshot = Snapshot(
            resources=[Resource(id="r1", name="A", capacity=100)], epics=[], app_name="P"
        )
        assert snapshot.to_json() == (
            "{\n"
            '  "resources": [\n'
            "    {\n"
            '      "id": "r1",\n'
            '      "name": "A",\n'
            '      "capacity": 100\n'
            "    }\n"
            "  ],\n"
            '  "epics": [],\n'
            '  "milestones": [],\n'
            '  "appName": "P"\n'
            "}"
        )

    def test_snapshot_milestones_optional(self) -> None:
        snapshot = Snapshot.model_validate_json('{"resources": [], "epics": []}')
        assert snapshot.milestones == []
        assert snapshot.app_name is None


class TestTask:
    def test_find_assignment(self) -> None:
        task = Task(
            id="t1",
            epic_id="e1",
            name="T",
            start=date(2026, 1, 10),
            end=date(2026, 1, 20),
            assignments=[Assignment(task_id="t1", resource_id="r1", effort=75)],
        )
        found = task.find_assignment("r1")
        assert found is not None
        assert found.effort == 75
        assert task.find_assignment("r2") is None

    def test_start_after_end_allowed(self) -> None:
        task = Task(id="t1", epic_id="e1", name="T", start=date(2026, 2, 1), end=date(2026, 1, 1))
        assert task.start > task.end
