# utils/exceptions.py

from typing import Optional


class TrackerError(Exception):
    """Base error for the project tracker"""
    pass


class ValidationError(TrackerError):
    """Invalid value handed to the engine (enum, sort key, filter)"""
    pass


class StoreError(TrackerError):
    """The task store rejected or failed a request"""

    def __init__(self, message: str, task_id: Optional[str] = None):
        super().__init__(message)
        self.task_id = task_id


class TaskNotFoundError(StoreError):
    """No task with the requested id"""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found", task_id=task_id)
