"""capplan - resource capacity planning.

Main entry points:
- EntityStore: the entity graph and its mutations
- LoadEngine: per-resource daily load and load status
- OverloadDetector: per-task overload queries
- CapacityPlanner: all of the above plus persistence
"""

from .load import DailyLoad, LoadEngine, LoadStatus, get_load_status
from .models import Assignment, Epic, Milestone, Resource, Snapshot, Task
from .overload import Overload, OverloadDetector
from .planner import CapacityPlanner
from .store import EntityStore

__all__ = [
    "Assignment",
    "CapacityPlanner",
    "DailyLoad",
    "EntityStore",
    "Epic",
    "LoadEngine",
    "LoadStatus",
    "Milestone",
    "Overload",
    "OverloadDetector",
    "Resource",
    "Snapshot",
    "Task",
    "get_load_status",
]
