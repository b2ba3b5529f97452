# services/task_service.py

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from models.enums import TaskStatus, coerce_enum
from models.task import Task
from services.data_service import TaskStore
from utils.datetime_utils import localize, now_local

logger = logging.getLogger(__name__)

DELEGATION_COMMENT_PREFIX = "Tarefa delegada: "
CONVERSION_COMMENT_TEMPLATE = "Tarefa convertida em projeto em {when}"

# ===== RESULTS =====


@dataclass
class MutationResult:
    """Outcome of one update request"""
    task_id: str
    ok: bool
    task: Optional[Task] = None
    error: Optional[str] = None
    exception: Optional[Exception] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "ok": self.ok,
            "task": self.task.to_dict() if self.task else None,
            "error": self.error,
        }


@dataclass
class BulkResult:
    """Per-id outcome of a bulk action; successes are never rolled back"""
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def partial(self) -> bool:
        return bool(self.failed) and bool(self.succeeded)

    @property
    def failed_ids(self) -> List[str]:
        return list(self.failed)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "failed": {task_id: str(error) for task_id, error in self.failed.items()},
            "total": self.total,
        }


# ===== SERVICE =====


class TaskService:
    """
    Issues partial updates against the task store

    - Status changes and (re)assignment, single or bulk
    - Delegation and project conversion with their audit comments
    - Appending comments

    Failures are reported in the returned result objects, never raised.
    """

    def __init__(self, store: TaskStore):
        self.store = store

    async def _update(self, task_id: str, fields: Dict[str, Any], action: str) -> MutationResult:
        try:
            task = await self.store.update_task(task_id, fields)
        except Exception as e:
            logger.error(f"❌ {action} failed for task {task_id}: {e}")
            return MutationResult(task_id=task_id, ok=False, error=str(e), exception=e)
        logger.info(f"✅ {action}: task {task_id}")
        return MutationResult(task_id=task_id, ok=True, task=task)

    # ===== SINGLE-TASK ACTIONS =====

    async def set_status(self, task_id: str, status) -> MutationResult:
        status = coerce_enum(TaskStatus, status, "status")
        return await self._update(task_id, {"status": status.value}, f"Status -> {status.value}")

    async def assign(self, task_id: str, profile_id: Optional[str]) -> MutationResult:
        return await self._update(task_id, {"assigned_to": profile_id}, f"Assigned to {profile_id}")

    async def delegate(
        self,
        task: Task,
        assignee_id: str,
        delegated_by: Optional[str] = None,
        note: Optional[str] = None,
    ) -> MutationResult:
        """Reassign and record who delegated; the creator delegates by default"""
        fields: Dict[str, Any] = {
            "assigned_to": assignee_id,
            "delegated_by": delegated_by or task.created_by,
        }
        if note and note.strip():
            fields["comments"] = [*task.comments, f"{DELEGATION_COMMENT_PREFIX}{note.strip()}"]
        return await self._update(task.id, fields, f"Delegated to {assignee_id}")

    async def convert_to_project(self, task: Task, now: Optional[datetime] = None) -> MutationResult:
        when = localize(now) if now is not None else now_local()
        comment = CONVERSION_COMMENT_TEMPLATE.format(when=when.strftime("%d/%m/%Y, %H:%M:%S"))
        fields = {
            "is_project": True,
            "comments": [*task.comments, comment],
        }
        return await self._update(task.id, fields, "Converted to project")

    async def add_comment(self, task: Task, text: str) -> MutationResult:
        text = (text or "").strip()
        if not text:
            return MutationResult(task_id=task.id, ok=False, error="Comment is empty")
        return await self._update(task.id, {"comments": [*task.comments, text]}, "Comment added")

    # ===== BULK ACTIONS =====

    async def bulk_update(self, task_ids: Iterable[str], fields: Dict[str, Any]) -> BulkResult:
        """One request per id, all in flight at once; completion order is not relied on"""
        ids = list(dict.fromkeys(task_ids))
        result = BulkResult()
        if not ids:
            return result

        outcomes = await asyncio.gather(
            *(self.store.update_task(task_id, dict(fields)) for task_id in ids),
            return_exceptions=True,
        )
        for task_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, Exception):
                result.failed[task_id] = outcome
                logger.warning(f"⚠️ Bulk update failed for task {task_id}: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(task_id)

        logger.info(f"✅ Bulk update {sorted(fields)}: {len(result.succeeded)}/{len(ids)} succeeded")
        return result

    async def bulk_set_status(self, task_ids: Iterable[str], status) -> BulkResult:
        status = coerce_enum(TaskStatus, status, "status")
        return await self.bulk_update(task_ids, {"status": status.value})

    async def bulk_assign(self, task_ids: Iterable[str], profile_id: Optional[str]) -> BulkResult:
        return await self.bulk_update(task_ids, {"assigned_to": profile_id})
