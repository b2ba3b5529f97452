# services/data_service.py

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from config import get_settings
from models.profile import Profile
from models.task import Task, TaskClassification
from utils.datetime_utils import now_local
from utils.exceptions import StoreError, TaskNotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Fields a caller may change through update_task
UPDATABLE_FIELDS = frozenset({
    "title",
    "description",
    "classification_id",
    "priority",
    "status",
    "assigned_to",
    "delegated_by",
    "due_date",
    "completed_at",
    "is_project",
    "project_id",
    "comments",
})


class TaskStore(ABC):
    """Data-access collaborator consumed by the engine"""

    @abstractmethod
    async def fetch_tasks(self) -> List[Task]:
        """Full snapshot, pre-joined with classification and profiles"""

    @abstractmethod
    async def fetch_profiles(self, ids: Optional[Iterable[str]] = None) -> List[Profile]:
        """All profiles, or only the requested ids"""

    @abstractmethod
    async def get_task(self, task_id: str) -> Task:
        """One joined task; raises TaskNotFoundError for an unknown id"""

    @abstractmethod
    async def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        """Apply a partial update; raises StoreError on rejection"""


class InMemoryTaskStore(TaskStore):
    """
    Store keeping raw task records in memory

    Records are kept in the store's own row shape; every fetch hands out fresh
    Task objects, so callers always work from a snapshot.
    """

    def __init__(
        self,
        tasks: Optional[Iterable[Dict[str, Any]]] = None,
        profiles: Optional[Iterable[Dict[str, Any]]] = None,
        classifications: Optional[Iterable[Dict[str, Any]]] = None,
    ):
        self._lock = threading.RLock()
        self._tasks: Dict[str, Dict[str, Any]] = {}
        self._profiles: Dict[str, Profile] = {}
        self._classifications: Dict[str, TaskClassification] = {}
        self.total_operations = 0
        self.failed_operations = 0
        self._load_records(tasks or [], profiles or [], classifications or [])

    def _load_records(self, tasks, profiles, classifications):
        with self._lock:
            for data in _records(classifications, "classification"):
                classification = TaskClassification.from_dict(data)
                self._classifications[classification.id] = classification

            for data in _records(profiles, "profile"):
                try:
                    profile = Profile.from_dict(data)
                except ValidationError as e:
                    logger.error(f"❌ Skipping profile {data.get('id')}: {e}")
                    continue
                self._profiles[profile.id] = profile

            for data in _records(tasks, "task"):
                try:
                    Task.from_dict(data)
                except (KeyError, TypeError, ValidationError) as e:
                    logger.error(f"❌ Skipping task record {data.get('id')}: {e}")
                    continue
                record = copy.deepcopy(data)
                record["id"] = str(record["id"])
                record.setdefault("comments", [])
                self._tasks[record["id"]] = record

    # ===== READS =====

    async def fetch_tasks(self) -> List[Task]:
        with self._lock:
            self.total_operations += 1
            return [self._join(record) for record in self._tasks.values()]

    async def fetch_profiles(self, ids: Optional[Iterable[str]] = None) -> List[Profile]:
        with self._lock:
            self.total_operations += 1
            if ids is None:
                return list(self._profiles.values())
            wanted = set(ids)
            return [profile for profile_id, profile in self._profiles.items() if profile_id in wanted]

    async def get_task(self, task_id: str) -> Task:
        with self._lock:
            record = self._tasks.get(task_id)
            if record is None:
                raise TaskNotFoundError(task_id)
            return self._join(record)

    def _join(self, record: Dict[str, Any]) -> Task:
        data = copy.deepcopy(record)
        classification = self._classifications.get(record.get("classification_id") or "")
        if classification is not None:
            data["classification"] = classification.to_dict()
        for source, target in (
            ("created_by", "created_by_profile"),
            ("assigned_to", "assigned_to_profile"),
            ("delegated_by", "delegated_by_profile"),
        ):
            profile = self._profiles.get(record.get(source) or "")
            if profile is not None:
                data[target] = profile.to_dict()
        return Task.from_dict(data)

    # ===== WRITES =====

    async def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        with self._lock:
            self.total_operations += 1
            record = self._tasks.get(task_id)
            if record is None:
                self.failed_operations += 1
                raise TaskNotFoundError(task_id)

            unknown = set(fields) - UPDATABLE_FIELDS
            if unknown:
                self.failed_operations += 1
                raise StoreError(f"Fields cannot be updated: {sorted(unknown)}", task_id=task_id)

            updated = dict(record)
            for name, value in fields.items():
                updated[name] = _serialize_value(value)
            updated["updated_at"] = now_local().isoformat()

            try:
                Task.from_dict(updated)
            except ValidationError as e:
                self.failed_operations += 1
                raise StoreError(str(e), task_id=task_id)

            self._tasks[task_id] = updated
            self._after_write()
            logger.debug(f"Task {task_id} updated: {sorted(fields)}")
            return self._join(updated)

    def _after_write(self):
        """Hook for persistent subclasses"""

    # ===== EXPORT =====

    def export_records(self) -> Dict[str, List[Dict[str, Any]]]:
        with self._lock:
            return {
                "classifications": [c.to_dict() for c in self._classifications.values()],
                "tasks": [copy.deepcopy(record) for record in self._tasks.values()],
                "profiles": [p.to_dict() for p in self._profiles.values()],
            }


class JsonTaskStore(InMemoryTaskStore):
    """In-memory store mirrored to JSON files, rewritten after every update"""

    def __init__(self, tasks_file: Path, profiles_file: Path):
        self.tasks_file = Path(tasks_file)
        self.profiles_file = Path(profiles_file)
        self.tasks_file.parent.mkdir(parents=True, exist_ok=True)

        task_data = self._load_json(self.tasks_file, default={}, expected=(dict, list))
        profile_data = self._load_json(self.profiles_file, default=[], expected=(list,))
        if isinstance(task_data, list):
            task_data = {"tasks": task_data}

        super().__init__(
            tasks=task_data.get("tasks") or [],
            profiles=profile_data,
            classifications=task_data.get("classifications") or [],
        )
        logger.info(f"📂 Loaded {len(self._tasks)} tasks and {len(self._profiles)} profiles from {self.tasks_file.parent}")

    @classmethod
    def from_settings(cls, settings=None) -> "JsonTaskStore":
        settings = settings or get_settings()
        return cls(settings.tasks_path, settings.profiles_path)

    def _load_json(self, file_path: Path, default, expected=(dict, list)):
        """Parsed file content; unreadable or wrongly shaped files are backed up and replaced by ``default``"""
        if not file_path.exists():
            logger.info(f"📂 {file_path} not found, starting empty")
            return default
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.error(f"❌ Could not parse {file_path}: {e}")
            self._backup_corrupted(file_path)
            return default
        if not isinstance(data, expected):
            logger.error(f"❌ Unexpected content in {file_path}: {type(data).__name__}")
            self._backup_corrupted(file_path)
            return default
        return data

    def _backup_corrupted(self, file_path: Path):
        backup_name = f"corrupted_{file_path.stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        backup_path = file_path.with_name(backup_name)
        file_path.replace(backup_path)
        logger.warning(f"🔄 Corrupted file moved to {backup_path}")

    def _after_write(self):
        records = self.export_records()
        self._save_json(self.tasks_file, {
            "classifications": records["classifications"],
            "tasks": records["tasks"],
        })

    def _save_json(self, file_path: Path, data):
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(file_path)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return list(value)
    return value


def _records(items: Any, kind: str) -> List[Dict[str, Any]]:
    """Dict entries of a loaded list; anything else is logged and dropped"""
    if not isinstance(items, (list, tuple)):
        logger.error(f"❌ Expected a list of {kind} records, got {type(items).__name__}")
        return []
    records = []
    for item in items:
        if isinstance(item, dict):
            records.append(item)
        else:
            logger.error(f"❌ Skipping malformed {kind} record: {item!r}")
    return records
