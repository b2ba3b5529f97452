# services/selection.py

import logging
from typing import Iterable, List, Optional, Protocol, Set

from services.task_service import BulkResult, TaskService

logger = logging.getLogger(__name__)


class VisibleRows(Protocol):
    def visible_ids(self) -> List[str]:
        ...


class SelectionController:
    """
    Selected task ids across projects and activities

    The set may keep ids that are currently hidden by a filter or a collapsed
    group; "select all visible" and the displayed count only ever look at the
    visible ids of the view handed in.
    """

    def __init__(self, task_service: Optional[TaskService] = None, selected: Optional[Iterable[str]] = None):
        self.task_service = task_service
        # a set passed in is shared, so the owner's state sees every change
        self.selected: Set[str] = selected if isinstance(selected, set) else set(selected or [])

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.selected

    def __len__(self) -> int:
        return len(self.selected)

    def toggle(self, task_id: str, included: bool) -> None:
        if included:
            self.selected.add(task_id)
        else:
            self.selected.discard(task_id)

    def clear(self) -> None:
        self.selected.clear()

    @staticmethod
    def visible_ids(view: VisibleRows) -> List[str]:
        return view.visible_ids()

    def select_all_visible(self, view: VisibleRows, checked: bool) -> None:
        visible = set(view.visible_ids())
        if checked:
            self.selected |= visible
        else:
            self.selected -= visible

    def selected_visible(self, view: VisibleRows) -> List[str]:
        return [task_id for task_id in view.visible_ids() if task_id in self.selected]

    def selected_visible_count(self, view: VisibleRows) -> int:
        return len(self.selected_visible(view))

    def all_visible_selected(self, view: VisibleRows) -> bool:
        visible = view.visible_ids()
        return bool(visible) and all(task_id in self.selected for task_id in visible)

    # ===== BULK ACTIONS =====

    def _target_ids(self, ids: Optional[Iterable[str]]) -> List[str]:
        return list(ids) if ids is not None else sorted(self.selected)

    def _require_service(self) -> TaskService:
        if self.task_service is None:
            raise RuntimeError("SelectionController has no TaskService for bulk actions")
        return self.task_service

    async def bulk_set_status(self, status, ids: Optional[Iterable[str]] = None) -> BulkResult:
        """Status change for every selected id (or the ids given); selection is left as is"""
        target = self._target_ids(ids)
        logger.info(f"🔄 Bulk status -> {getattr(status, 'value', status)} for {len(target)} tasks")
        return await self._require_service().bulk_set_status(target, status)

    async def bulk_assign(self, assignee_id: Optional[str], ids: Optional[Iterable[str]] = None) -> BulkResult:
        target = self._target_ids(ids)
        logger.info(f"🔄 Bulk assign -> {assignee_id} for {len(target)} tasks")
        return await self._require_service().bulk_assign(target, assignee_id)
