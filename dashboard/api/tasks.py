import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from services.data_service import TaskStore
from services.task_service import BulkResult, MutationResult, TaskService
from utils.exceptions import TaskNotFoundError

from ..dependencies import find_task, get_now, get_task_service, get_task_store
from ..schemas import (
    AssigneeUpdate,
    BulkAssignRequest,
    BulkStatusRequest,
    CommentRequest,
    DelegateRequest,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _mutation_response(result: MutationResult) -> Dict[str, Any]:
    if result.ok:
        return result.to_dict()
    if isinstance(result.exception, TaskNotFoundError):
        raise HTTPException(status_code=404, detail=result.error)
    raise HTTPException(status_code=422, detail=result.error)


def _bulk_response(result: BulkResult) -> JSONResponse:
    # 207 when at least one id failed; successes are kept either way
    return JSONResponse(status_code=200 if result.ok else 207, content=result.to_dict())


# ===== BULK =====

@router.post("/bulk/status")
async def bulk_set_status(
    request: BulkStatusRequest,
    service: TaskService = Depends(get_task_service),
):
    result = await service.bulk_set_status(request.ids, request.status)
    return _bulk_response(result)


@router.post("/bulk/assign")
async def bulk_assign(
    request: BulkAssignRequest,
    service: TaskService = Depends(get_task_service),
):
    result = await service.bulk_assign(request.ids, request.assignee_id)
    return _bulk_response(result)


# ===== SINGLE TASK =====

@router.get("/{task_id}", response_model=Dict[str, Any])
async def get_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    task = await find_task(task_id, store)
    return task.to_dict()


@router.patch("/{task_id}/status", response_model=Dict[str, Any])
async def set_status(
    task_id: str,
    update: StatusUpdate,
    service: TaskService = Depends(get_task_service),
):
    return _mutation_response(await service.set_status(task_id, update.status))


@router.patch("/{task_id}/assignee", response_model=Dict[str, Any])
async def assign(
    task_id: str,
    update: AssigneeUpdate,
    service: TaskService = Depends(get_task_service),
):
    return _mutation_response(await service.assign(task_id, update.assignee_id))


@router.post("/{task_id}/delegate", response_model=Dict[str, Any])
async def delegate(
    task_id: str,
    request: DelegateRequest,
    store: TaskStore = Depends(get_task_store),
    service: TaskService = Depends(get_task_service),
):
    task = await find_task(task_id, store)
    result = await service.delegate(task, request.assignee_id, request.delegated_by, request.note)
    return _mutation_response(result)


@router.post("/{task_id}/convert", response_model=Dict[str, Any])
async def convert_to_project(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
    service: TaskService = Depends(get_task_service),
    now: datetime = Depends(get_now),
):
    task = await find_task(task_id, store)
    if task.is_project:
        raise HTTPException(status_code=409, detail="Task is already a project")
    return _mutation_response(await service.convert_to_project(task, now=now))


@router.post("/{task_id}/comments", response_model=Dict[str, Any])
async def add_comment(
    task_id: str,
    request: CommentRequest,
    store: TaskStore = Depends(get_task_store),
    service: TaskService = Depends(get_task_service),
):
    task = await find_task(task_id, store)
    return _mutation_response(await service.add_comment(task, request.text))
