from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from config import get_settings
from models.task import Task
from services.statistics import compute_task_stats, recent_open_tasks, tasks_by_status

from ..dependencies import get_now, get_snapshot

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("", response_model=Dict[str, Any])
async def get_overview_stats(
    tasks: List[Task] = Depends(get_snapshot),
    now: datetime = Depends(get_now),
):
    """
    Counters, newest open tasks and per-status column sizes
    """
    stats = compute_task_stats(tasks, now)
    recent = recent_open_tasks(tasks, limit=get_settings().RECENT_TASKS_LIMIT)
    columns = tasks_by_status(tasks, now)

    return {
        "stats": stats.to_dict(),
        "recent": [task.to_dict() for task in recent],
        "by_status": {name: len(column) for name, column in columns.items()},
        "generated_at": now.isoformat(),
    }
