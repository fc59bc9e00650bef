"""Data models for capplan.

Entities are pydantic models so the same classes serve as the in-memory
entity graph and as the persisted/exported JSON format. Attribute names are
snake_case in Python and camelCase on the wire.

``Task.epic_id`` and ``Assignment.resource_id`` are plain lookup keys, not
owning references. Deleting the referenced entity does not update them; the
store cascades deletions explicitly.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Percentages are kept as given (75 stays 75, 37.5 stays 37.5)
Percent = int | float


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Resource(_WireModel):
    """A person (or unit) with a daily capacity ceiling in percent."""

    id: str
    name: str
    avatar: str | None = None
    color: str | None = None  # For role labeling
    capacity: Percent


class Assignment(_WireModel):
    """Effort (in percent of a day) a resource puts into a task."""

    task_id: str
    resource_id: str
    effort: Percent


class Task(_WireModel):
    """A scheduled unit of work over an inclusive date range."""

    id: str
    epic_id: str
    name: str
    start: datetime.date
    end: datetime.date
    assignments: list[Assignment] = Field(default_factory=list[Assignment])

    def find_assignment(self, resource_id: str) -> Assignment | None:
        """Return this task's assignment for a resource, if any."""
        for assignment in self.assignments:
            if assignment.resource_id == resource_id:
                return assignment
        return None


class Epic(_WireModel):
    """A grouping of tasks. Task order is display order."""

    id: str
    title: str
    description: str | None = None
    color: str | None = None
    tasks: list[Task] = Field(default_factory=list[Task])


class Milestone(_WireModel):
    """A labeled date on the timeline. Not part of load computation."""

    id: str
    date: datetime.date
    label: str
    color: str | None = None


class Snapshot(_WireModel):
    """The whole entity graph, as persisted and exported.

    ``app_name`` is optional on input; an import without it keeps the
    current name.
    """

    resources: list[Resource]
    epics: list[Epic]
    milestones: list[Milestone] = Field(default_factory=list[Milestone])
    app_name: str | None = None

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON (the export format)."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
