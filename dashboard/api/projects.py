import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from config import get_settings
from models.profile import ProfileDirectory
from services.data_service import TaskStore
from services.filters import ALL, FilterCriteria
from services.hierarchy import activities_for
from services.metrics import compute_row_metrics
from services.project_board import BoardState, ProjectBoard
from services.sorting import SortState
from utils.exceptions import ValidationError

from ..dependencies import find_task, get_now, get_task_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=Dict[str, Any])
async def get_project_board(
    store: TaskStore = Depends(get_task_store),
    now: datetime = Depends(get_now),
    search: str = Query(""),
    status: str = Query(ALL),
    priority: str = Query(ALL),
    assignee: str = Query(ALL),
    sort_by: Optional[str] = Query(None),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    collapsed: List[str] = Query([]),
):
    """
    Projects grouped by classification, with activities, metrics and group progress
    """
    try:
        state = BoardState(
            collapsed_groups=set(collapsed),
            sort=SortState.from_dict({"key": sort_by, "direction": order}),
            filters=FilterCriteria(search=search, status=status, priority=priority, assignee=assignee),
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    board = ProjectBoard(state=state, unclassified_label=get_settings().UNCLASSIFIED_LABEL)
    view = await board.load_view(store, now=now)
    logger.debug(f"📊 Board built: {view.project_count} projects in {len(view.groups)} groups")

    return {
        **view.to_dict(),
        "state": state.to_dict(),
    }


@router.get("/{project_id}", response_model=Dict[str, Any])
async def get_project(
    project_id: str,
    store: TaskStore = Depends(get_task_store),
    now: datetime = Depends(get_now),
):
    """Single project with its activities"""
    project = await find_task(project_id, store)
    if not project.is_project:
        raise HTTPException(status_code=404, detail="Project not found")

    tasks = await store.fetch_tasks()
    profiles = ProfileDirectory(await store.fetch_profiles())
    activities = activities_for(project.id, tasks)

    return {
        "project": project.to_dict(),
        "metrics": compute_row_metrics(project, now, profiles, activities=activities).to_dict(),
        "activities": [
            {
                "task": activity.to_dict(),
                "metrics": compute_row_metrics(activity, now, profiles).to_dict(),
            }
            for activity in activities
        ],
    }
