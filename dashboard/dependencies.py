#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project Tracker - Dashboard Dependencies
Providers for the FastAPI routers
"""

import logging
from datetime import datetime
from typing import List

from fastapi import Depends, HTTPException, status

from models.task import Task
from services import get_service_manager
from services.data_service import TaskStore
from services.task_service import TaskService
from utils.datetime_utils import now_local
from utils.exceptions import TaskNotFoundError

logger = logging.getLogger(__name__)


def get_task_store() -> TaskStore:
    manager = get_service_manager()
    if not manager.initialized or manager.store is None:
        logger.error("❌ Task store requested before services were initialised")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Task store unavailable")
    return manager.store


def get_task_service(store: TaskStore = Depends(get_task_store)) -> TaskService:
    manager = get_service_manager()
    return manager.task_service or TaskService(store)


def get_now() -> datetime:
    """Evaluation instant for derived fields; overridden in tests"""
    return now_local()


async def find_task(task_id: str, store: TaskStore) -> Task:
    try:
        return await store.get_task(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


async def get_snapshot(store: TaskStore = Depends(get_task_store)) -> List[Task]:
    return await store.fetch_tasks()
