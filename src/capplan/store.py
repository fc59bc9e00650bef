"""Entity store: the canonical entity graph and every mutation on it.

Mutations follow a best-effort policy. A lookup miss (unknown epic, task,
resource or milestone id) changes nothing and makes the method return False;
it never raises. Every applied mutation returns True and notifies the
registered change callbacks, which is where persistence hooks in.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from pydantic import ValidationError

from .logger import get_logger
from .models import Assignment, Epic, Milestone, Percent, Resource, Snapshot, Task

logger = get_logger()

DEFAULT_APP_NAME = "My Project"

ChangeCallback = Callable[["EntityStore"], None]


class EntityStore:
    """Owns resources, epics (with their tasks) and milestones."""

    def __init__(
        self,
        resources: list[Resource] | None = None,
        epics: list[Epic] | None = None,
        milestones: list[Milestone] | None = None,
        app_name: str = DEFAULT_APP_NAME,
    ) -> None:
        self.resources: list[Resource] = resources if resources is not None else []
        self.epics: list[Epic] = epics if epics is not None else []
        self.milestones: list[Milestone] = milestones if milestones is not None else []
        self.app_name = app_name
        self._callbacks: list[ChangeCallback] = []
        self._batch_depth = 0
        self._pending_change = False

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> EntityStore:
        """Build a store holding a copy of a snapshot's entities."""
        store = cls()
        store._apply_snapshot(snapshot.model_copy(deep=True))
        return store

    # --- Change notification ---

    def subscribe(self, callback: ChangeCallback) -> None:
        """Register a callback invoked after every applied mutation."""
        self._callbacks.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        """Remove a previously registered callback (no-op if absent)."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @contextmanager
    def batch(self) -> Iterator[EntityStore]:
        """Group mutations so callbacks run once, after the outermost batch.

        Callbacks are skipped entirely if nothing in the batch was applied.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending_change:
                self._pending_change = False
                self._notify()

    def _changed(self, message: str) -> bool:
        logger.changes(message)
        if self._batch_depth > 0:
            self._pending_change = True
        else:
            self._notify()
        return True

    def _notify(self) -> None:
        for callback in list(self._callbacks):
            callback(self)

    # --- Lookups ---

    @property
    def all_tasks(self) -> list[Task]:
        """All tasks across all epics, in epic then task order."""
        return [task for epic in self.epics for task in epic.tasks]

    def find_resource(self, resource_id: str) -> Resource | None:
        """Return the resource with this id, or None."""
        return next((r for r in self.resources if r.id == resource_id), None)

    def find_epic(self, epic_id: str) -> Epic | None:
        """Return the epic with this id, or None."""
        return next((e for e in self.epics if e.id == epic_id), None)

    def find_task(self, task_id: str) -> Task | None:
        """Return the first task with this id across all epics, or None."""
        return next((t for t in self.all_tasks if t.id == task_id), None)

    def find_milestone(self, milestone_id: str) -> Milestone | None:
        """Return the milestone with this id, or None."""
        return next((m for m in self.milestones if m.id == milestone_id), None)

    # --- Resources ---

    def add_resource(self, resource: Resource) -> bool:
        self.resources.append(resource)
        return self._changed(f"Added resource {resource.id} ({resource.name})")

    def update_resource(self, resource: Resource) -> bool:
        """Replace the resource with the same id, keeping its position."""
        index = _index_of(self.resources, resource.id)
        if index is None:
            return False
        self.resources[index] = resource
        return self._changed(f"Updated resource {resource.id}")

    def delete_resource(self, resource_id: str) -> bool:
        """Delete a resource and every assignment that references it.

        The assignment cascade runs even if the resource itself is already
        gone, so dangling assignments left by an import are cleaned up too.
        """
        index = _index_of(self.resources, resource_id)
        if index is not None:
            del self.resources[index]

        removed = 0
        for task in self.all_tasks:
            kept = [a for a in task.assignments if a.resource_id != resource_id]
            removed += len(task.assignments) - len(kept)
            task.assignments = kept

        if index is None and removed == 0:
            return False
        return self._changed(
            f"Deleted resource {resource_id} and {removed} assignment(s) referencing it"
        )

    # --- Epics ---

    def add_epic(self, epic: Epic) -> bool:
        self.epics.append(epic)
        return self._changed(f"Added epic {epic.id} ({epic.title})")

    def update_epic(self, epic: Epic) -> bool:
        """Replace the epic with the same id, keeping its position."""
        index = _index_of(self.epics, epic.id)
        if index is None:
            return False
        self.epics[index] = epic
        return self._changed(f"Updated epic {epic.id}")

    def delete_epic(self, epic_id: str) -> bool:
        """Delete an epic together with the tasks it owns."""
        index = _index_of(self.epics, epic_id)
        if index is None:
            return False
        del self.epics[index]
        return self._changed(f"Deleted epic {epic_id}")

    # --- Tasks ---

    def add_task(self, epic_id: str, task: Task) -> bool:
        """Append a task to an epic. Does nothing if the epic is unknown."""
        epic = self.find_epic(epic_id)
        if epic is None:
            return False
        epic.tasks.append(task)
        return self._changed(f"Added task {task.id} to epic {epic_id}")

    def update_task(self, task: Task) -> bool:
        """Replace the first task with the same id, in place within its epic."""
        for epic in self.epics:
            index = _index_of(epic.tasks, task.id)
            if index is not None:
                epic.tasks[index] = task
                return self._changed(f"Updated task {task.id}")
        return False

    def delete_task(self, task_id: str) -> bool:
        """Remove the first task with this id, searching epics in order."""
        for epic in self.epics:
            index = _index_of(epic.tasks, task_id)
            if index is not None:
                del epic.tasks[index]
                return self._changed(f"Deleted task {task_id} from epic {epic.id}")
        return False

    # --- Assignments ---

    def update_assignment(self, task_id: str, resource_id: str, effort: Percent) -> bool:
        """Set a resource's effort on a task, adding the assignment if needed.

        There is never more than one assignment per (task, resource) pair.
        """
        task = self.find_task(task_id)
        if task is None:
            return False

        assignment = task.find_assignment(resource_id)
        if assignment is not None:
            assignment.effort = effort
            return self._changed(f"Set {resource_id} effort on {task_id} to {effort}")

        task.assignments.append(
            Assignment(task_id=task_id, resource_id=resource_id, effort=effort)
        )
        return self._changed(f"Assigned {resource_id} to {task_id} at {effort}")

    def remove_assignment(self, task_id: str, resource_id: str) -> bool:
        task = self.find_task(task_id)
        if task is None:
            return False
        kept = [a for a in task.assignments if a.resource_id != resource_id]
        if len(kept) == len(task.assignments):
            return False
        task.assignments = kept
        return self._changed(f"Unassigned {resource_id} from {task_id}")

    # --- Milestones ---

    def add_milestone(self, milestone: Milestone) -> bool:
        self.milestones.append(milestone)
        return self._changed(f"Added milestone {milestone.id} ({milestone.label})")

    def update_milestone(self, milestone: Milestone) -> bool:
        index = _index_of(self.milestones, milestone.id)
        if index is None:
            return False
        self.milestones[index] = milestone
        return self._changed(f"Updated milestone {milestone.id}")

    def delete_milestone(self, milestone_id: str) -> bool:
        index = _index_of(self.milestones, milestone_id)
        if index is None:
            return False
        del self.milestones[index]
        return self._changed(f"Deleted milestone {milestone_id}")

    # --- Whole state ---

    def update_app_name(self, name: str) -> bool:
        self.app_name = name
        return self._changed(f"Renamed project to {name!r}")

    def snapshot(self) -> Snapshot:
        """Return a deep copy of the current state."""
        return Snapshot(
            resources=self.resources,
            epics=self.epics,
            milestones=self.milestones,
            app_name=self.app_name,
        ).model_copy(deep=True)

    def replace_state(self, snapshot: Snapshot) -> bool:
        """Replace the whole entity graph with a copy of a snapshot's contents."""
        return self._replace_with(snapshot.model_copy(deep=True))

    def _replace_with(self, snapshot: Snapshot) -> bool:
        self._apply_snapshot(snapshot)
        return self._changed(
            f"Replaced state: {len(self.resources)} resource(s), {len(self.epics)} epic(s), "
            f"{len(self.milestones)} milestone(s)"
        )

    def export_state(self) -> str:
        """Serialize the current state as pretty-printed JSON."""
        return self.snapshot().to_json()

    def import_state(self, text: str | bytes) -> bool:
        """Replace the whole state from exported JSON.

        Only the structure is checked; references between entities are not.
        On any parse or structure error the current state is left untouched
        and False is returned.
        """
        try:
            snapshot = Snapshot.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Invalid import data: {e}")
            return False
        return self._replace_with(snapshot)

    def _apply_snapshot(self, snapshot: Snapshot) -> None:
        self.resources = snapshot.resources
        self.epics = snapshot.epics
        self.milestones = snapshot.milestones
        if snapshot.app_name:
            self.app_name = snapshot.app_name


def _index_of(items: Sequence[Resource | Epic | Task | Milestone], item_id: str) -> int | None:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None
