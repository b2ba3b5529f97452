# services/project_board.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from models.profile import Profile, ProfileDirectory
from models.task import Task
from services.data_service import TaskStore
from services.filters import FilterCriteria, apply_filters
from services.hierarchy import build_project_nodes, find_orphan_activities, group_projects
from services.metrics import RowMetrics, compute_row_metrics
from services.progress import group_progress
from services.selection import SelectionController
from services.sorting import SortState, sort_rows
from services.task_service import BulkResult, MutationResult, TaskService
from utils.datetime_utils import localize, now_local

logger = logging.getLogger(__name__)

# ===== VIEW MODEL =====


@dataclass
class ActivityRow:
    task: Task
    metrics: RowMetrics

    def to_dict(self) -> Dict[str, Any]:
        return self.metrics.to_dict()


@dataclass
class ProjectRow:
    project: Task
    metrics: RowMetrics
    activities: List[ActivityRow] = field(default_factory=list)

    def ids(self) -> List[str]:
        return [self.project.id] + [row.task.id for row in self.activities]

    def to_dict(self) -> Dict[str, Any]:
        data = self.metrics.to_dict()
        data["activities"] = [row.to_dict() for row in self.activities]
        return data


@dataclass
class GroupView:
    name: str
    progress: int
    collapsed: bool = False
    rows: List[ProjectRow] = field(default_factory=list)

    def visible_ids(self) -> List[str]:
        if self.collapsed:
            return []
        ids: List[str] = []
        for row in self.rows:
            ids.extend(row.ids())
        return ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "progress": self.progress,
            "collapsed": self.collapsed,
            "projects": [row.to_dict() for row in self.rows],
        }


@dataclass
class BoardView:
    """Grouped, ordered table model ready for rendering"""
    groups: List[GroupView]
    generated_at: datetime
    orphan_activity_ids: List[str] = field(default_factory=list)

    def group(self, name: str) -> Optional[GroupView]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def visible_ids(self) -> List[str]:
        """Each visible project id followed by its activity ids, in display order"""
        ids: List[str] = []
        for group in self.groups:
            ids.extend(group.visible_ids())
        return ids

    @property
    def project_count(self) -> int:
        return sum(len(group.rows) for group in self.groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "groups": [group.to_dict() for group in self.groups],
            "project_count": self.project_count,
            "orphan_activity_ids": list(self.orphan_activity_ids),
        }


# ===== ENGINE STATE =====


@dataclass
class BoardState:
    """Process-local UI state of one board; nothing here is persisted"""
    collapsed_groups: Set[str] = field(default_factory=set)
    sort: SortState = field(default_factory=SortState)
    filters: FilterCriteria = field(default_factory=FilterCriteria)
    selected: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collapsed_groups": sorted(self.collapsed_groups),
            "sort": self.sort.to_dict(),
            "filters": self.filters.to_dict(),
            "selected": sorted(self.selected),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "BoardState":
        data = data or {}
        return cls(
            collapsed_groups=set(data.get("collapsed_groups") or []),
            sort=SortState.from_dict(data.get("sort")),
            filters=FilterCriteria.from_dict(data.get("filters")),
            selected=set(data.get("selected") or []),
        )


# ===== ENGINE =====


class ProjectBoard:
    """
    Project roll-up engine for one active view

    Pipeline: filter projects -> attach activities from the full snapshot ->
    bucket by classification -> compute metrics and progress -> sort rows
    inside each bucket. The engine never patches tasks; after a mutation the
    caller rebuilds the view from a fresh snapshot.
    """

    def __init__(
        self,
        task_service: Optional[TaskService] = None,
        state: Optional[BoardState] = None,
        clock: Optional[Callable[[], datetime]] = None,
        unclassified_label: Optional[str] = None,
    ):
        self.task_service = task_service
        self.state = state or BoardState()
        self.clock = clock or now_local
        self.unclassified_label = unclassified_label
        self.selection = SelectionController(task_service, selected=self.state.selected)
        self.last_view: Optional[BoardView] = None
        self._snapshot: Optional[Tuple[List[Task], ProfileDirectory, datetime]] = None

    # ===== VIEW ASSEMBLY =====

    def build_view(
        self,
        tasks: Sequence[Task],
        profiles: Optional[Iterable[Profile]] = None,
        now: Optional[datetime] = None,
    ) -> BoardView:
        now = localize(now) if now is not None else self.clock()
        tasks = list(tasks)
        directory = profiles if isinstance(profiles, ProfileDirectory) else ProfileDirectory(profiles)
        self._snapshot = (tasks, directory, now)

        candidates = apply_filters((task for task in tasks if task.is_project), self.state.filters, directory)
        nodes = build_project_nodes(candidates, tasks)

        groups: List[GroupView] = []
        for bucket in group_projects(nodes, self.unclassified_label):
            rows = [
                ProjectRow(
                    project=node.project,
                    metrics=compute_row_metrics(node.project, now, directory, activities=node.activities),
                    activities=[
                        ActivityRow(task=activity, metrics=compute_row_metrics(activity, now, directory))
                        for activity in node.activities
                    ],
                )
                for node in bucket.nodes
            ]
            groups.append(GroupView(
                name=bucket.name,
                progress=group_progress(row.metrics.progress for row in rows),
                collapsed=bucket.name in self.state.collapsed_groups,
                rows=sort_rows(rows, self.state.sort),
            ))

        orphans = [task.id for task in find_orphan_activities(tasks)]
        if orphans:
            logger.debug(f"{len(orphans)} activities reference unknown projects and were left out")

        view = BoardView(groups=groups, generated_at=now, orphan_activity_ids=orphans)
        self.last_view = view
        return view

    async def load_view(self, store: TaskStore, now: Optional[datetime] = None) -> BoardView:
        """Fetch a fresh snapshot and rebuild the view"""
        tasks = await store.fetch_tasks()
        profiles = await store.fetch_profiles()
        return self.build_view(tasks, profiles, now=now)

    def _rebuild(self) -> None:
        """Re-run the pipeline over the last snapshot, rows back in input order"""
        if self._snapshot is not None:
            tasks, directory, now = self._snapshot
            self.build_view(tasks, directory, now=now)

    def visible_ids(self) -> List[str]:
        return self.last_view.visible_ids() if self.last_view else []

    # ===== STATE CALLBACKS =====

    def on_toggle_select(self, task_id: str, included: bool) -> None:
        self.selection.toggle(task_id, included)

    def on_select_all_visible(self, checked: bool) -> None:
        if self.last_view is None:
            return
        self.selection.select_all_visible(self.last_view, checked)

    def selected_visible_count(self) -> int:
        return self.selection.selected_visible_count(self.last_view) if self.last_view else 0

    def on_toggle_group_collapse(self, name: str) -> bool:
        """Returns True when the group is now collapsed"""
        if name in self.state.collapsed_groups:
            self.state.collapsed_groups.discard(name)
            collapsed = False
        else:
            self.state.collapsed_groups.add(name)
            collapsed = True
        if self.last_view is not None:
            group = self.last_view.group(name)
            if group is not None:
                group.collapsed = collapsed
        return collapsed

    def on_sort(self, key) -> SortState:
        self.state.sort = self.state.sort.toggle(key)
        self._rebuild()
        return self.state.sort

    def on_filter_change(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> FilterCriteria:
        """Merge the given criteria; the current view is rebuilt from its snapshot"""
        self.state.filters = self.state.filters.update(
            search=search, status=status, priority=priority, assignee=assignee,
        )
        self._rebuild()
        return self.state.filters

    # ===== MUTATION CALLBACKS =====

    def _service(self) -> TaskService:
        if self.task_service is None:
            raise RuntimeError("ProjectBoard was created without a TaskService")
        return self.task_service

    async def on_set_status(self, task_id: str, status) -> MutationResult:
        return await self._service().set_status(task_id, status)

    async def on_assign(self, task_id: str, profile_id: Optional[str]) -> MutationResult:
        return await self._service().assign(task_id, profile_id)

    async def on_bulk_set_status(self, ids: Optional[Iterable[str]], status) -> BulkResult:
        return await self.selection.bulk_set_status(status, ids)

    async def on_bulk_assign(self, ids: Optional[Iterable[str]], profile_id: Optional[str]) -> BulkResult:
        return await self.selection.bulk_assign(profile_id, ids)


__all__ = [
    "ActivityRow",
    "BoardState",
    "BoardView",
    "GroupView",
    "ProjectBoard",
    "ProjectRow",
]
