# services/metrics.py

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from models.enums import TaskPriority, TaskStatus
from models.profile import ProfileDirectory
from models.task import Task
from services.progress import activity_progress, project_progress
from utils.datetime_utils import (
    business_days_between,
    calendar_days_between,
    format_date,
    resolve_endpoint,
)


@dataclass(frozen=True)
class RowMetrics:
    """Derived, render-ready figures for one project or activity row"""
    task_id: str
    title: str
    assignee_id: Optional[str]
    assignee_name: Optional[str]
    priority: TaskPriority
    status: TaskStatus
    is_project: bool
    start: datetime
    end: datetime
    business_days: int
    calendar_days: int
    progress: int
    is_overdue: bool
    due_date: Optional[datetime]
    first_comment: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.task_id,
            "title": self.title,
            "assignee_id": self.assignee_id,
            "assignee_name": self.assignee_name,
            "priority": self.priority.value,
            "status": self.status.value,
            "is_project": self.is_project,
            "start_date": self.start.isoformat(),
            "end_date": self.end.isoformat(),
            "start_label": format_date(self.start),
            "due_label": format_date(self.due_date),
            "business_days": self.business_days,
            "calendar_days": self.calendar_days,
            "progress": self.progress,
            "is_overdue": self.is_overdue,
            "comment": self.first_comment,
        }


def compute_row_metrics(
    task: Task,
    now: datetime,
    profiles: ProfileDirectory,
    activities: Optional[Sequence[Task]] = None,
) -> RowMetrics:
    """Metrics for a project (activities given) or an activity (activities None).

    A missing or unparseable created_at is taken as ``now``.
    """
    start = task.created_at_dt or now
    end = resolve_endpoint(task.completed_at, task.due_date, now)
    if activities is None:
        progress = activity_progress(task)
    else:
        progress = project_progress(task, activities)

    return RowMetrics(
        task_id=task.id,
        title=task.title,
        assignee_id=task.assigned_to,
        assignee_name=profiles.assignee_name(task),
        priority=task.priority,
        status=task.status,
        is_project=task.is_project,
        start=start,
        end=end,
        business_days=business_days_between(start, end),
        calendar_days=calendar_days_between(start, end),
        progress=progress,
        is_overdue=task.is_overdue(now),
        due_date=task.due_date_dt,
        first_comment=task.first_comment(),
    )
