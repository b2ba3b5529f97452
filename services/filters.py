# services/filters.py

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from models.enums import TaskPriority, TaskStatus, coerce_enum
from models.profile import ProfileDirectory
from models.task import Task

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True)
class FilterCriteria:
    """Search text plus categorical filters; ALL disables a filter"""
    search: str = ""
    status: str = ALL
    priority: str = ALL
    assignee: str = ALL

    def __post_init__(self):
        object.__setattr__(self, "search", self.search or "")
        for name, enum_class in (("status", TaskStatus), ("priority", TaskPriority)):
            value = getattr(self, name)
            if value is None or value == ALL:
                object.__setattr__(self, name, ALL)
            else:
                object.__setattr__(self, name, coerce_enum(enum_class, value, name).value)
        if self.assignee is None:
            object.__setattr__(self, "assignee", ALL)

    @property
    def is_empty(self) -> bool:
        return not self.search and self.status == self.priority == self.assignee == ALL

    def update(self, **changes: Any) -> "FilterCriteria":
        """Copy with the given fields replaced; None-valued keys are ignored"""
        unknown = set(changes) - {"search", "status", "priority", "assignee"}
        if unknown:
            raise TypeError(f"Unknown filter fields: {sorted(unknown)}")
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    def to_dict(self) -> Dict[str, str]:
        return {
            "search": self.search,
            "status": self.status,
            "priority": self.priority,
            "assignee": self.assignee,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FilterCriteria":
        data = data or {}
        return cls(
            search=data.get("search") or "",
            status=data.get("status") or ALL,
            priority=data.get("priority") or ALL,
            assignee=data.get("assignee") or ALL,
        )


# ===== PREDICATES =====

def matches_status(task: Task, criteria: FilterCriteria) -> bool:
    return criteria.status == ALL or task.status.value == criteria.status


def matches_priority(task: Task, criteria: FilterCriteria) -> bool:
    return criteria.priority == ALL or task.priority.value == criteria.priority


def matches_assignee(task: Task, criteria: FilterCriteria) -> bool:
    return criteria.assignee == ALL or task.assigned_to == criteria.assignee


def matches_search(task: Task, criteria: FilterCriteria, profiles: ProfileDirectory) -> bool:
    if not criteria.search:
        return True
    needle = criteria.search.casefold()
    fields = (task.title, task.description or "", profiles.assignee_name(task) or "")
    return any(needle in text.casefold() for text in fields)


def apply_filters(
    projects: Iterable[Task],
    criteria: FilterCriteria,
    profiles: Optional[ProfileDirectory] = None,
) -> List[Task]:
    """Keep the projects passing every predicate, input order preserved"""
    profiles = profiles or ProfileDirectory()
    results = [
        task for task in projects
        if matches_status(task, criteria)
        and matches_priority(task, criteria)
        and matches_assignee(task, criteria)
        and matches_search(task, criteria, profiles)
    ]
    if not criteria.is_empty:
        logger.debug(f"🔍 Filters {criteria.to_dict()} kept {len(results)} projects")
    return results
