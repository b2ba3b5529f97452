# services/statistics.py

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Sequence

from models.enums import TaskPriority, TaskStatus
from models.task import Task
from services.hierarchy import find_orphan_activities
from services.progress import percent

logger = logging.getLogger(__name__)


@dataclass
class TaskStats:
    """Dashboard counters over the whole snapshot"""
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    overdue: int = 0
    urgent: int = 0
    projects: int = 0
    assigned: int = 0
    orphan_activities: int = 0
    completion_rate: int = 0
    urgent_rate: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_task_stats(tasks: Sequence[Task], now: datetime) -> TaskStats:
    """Counters; ``overdue`` is the computed flag, not the stored ATRASADA label"""
    stats = TaskStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == TaskStatus.CONCLUIDA),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.EM_PROGRESSO),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDENTE),
        overdue=sum(1 for t in tasks if t.is_overdue(now)),
        urgent=sum(1 for t in tasks if t.priority == TaskPriority.URGENTE),
        projects=sum(1 for t in tasks if t.is_project),
        assigned=sum(1 for t in tasks if t.assigned_to),
        orphan_activities=len(find_orphan_activities(tasks)),
    )
    stats.completion_rate = percent(stats.completed, stats.total)
    stats.urgent_rate = percent(stats.urgent, stats.total)
    logger.debug(f"📊 Stats computed for {stats.total} tasks")
    return stats


def recent_open_tasks(tasks: Sequence[Task], limit: int = 5) -> List[Task]:
    """Newest non-completed tasks first; undated tasks go last"""
    open_tasks = [t for t in tasks if not t.is_completed]
    dated = [t for t in open_tasks if t.created_at_dt is not None]
    undated = [t for t in open_tasks if t.created_at_dt is None]
    dated.sort(key=lambda t: t.created_at_dt, reverse=True)
    return (dated + undated)[:limit]


def tasks_by_status(tasks: Sequence[Task], now: datetime) -> Dict[str, List[Task]]:
    """Status columns of the task list.

    The ATRASADA column holds the computed overdue tasks, so a task can sit in
    both its stored-status column and the overdue one.
    """
    columns: Dict[str, List[Task]] = {
        TaskStatus.PENDENTE.value: [],
        TaskStatus.EM_PROGRESSO.value: [],
        TaskStatus.CONCLUIDA.value: [],
        TaskStatus.ATRASADA.value: [],
    }
    for task in tasks:
        if task.status != TaskStatus.ATRASADA:
            columns[task.status.value].append(task)
        if task.is_overdue(now):
            columns[TaskStatus.ATRASADA.value].append(task)
    return columns
