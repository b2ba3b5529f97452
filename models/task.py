# models/task.py

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from models.enums import TaskPriority, TaskStatus, coerce_enum
from models.profile import Profile
from utils.datetime_utils import TimestampLike, parse_timestamp

_TIMESTAMP_FIELDS = ("created_at", "updated_at", "due_date", "completed_at")
_PROFILE_FIELDS = ("created_by_profile", "assigned_to_profile", "delegated_by_profile")


@dataclass
class TaskClassification:
    """Named bucket a project can belong to"""
    id: str
    name: str
    color: str = ""
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskClassification":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            color=data.get("color") or "",
            description=data.get("description"),
        )


@dataclass
class Task:
    """A task record as served by the store.

    A task is a project when ``is_project`` is set and an activity when it
    carries a ``project_id``. Timestamps are kept as supplied (ISO text or
    datetime) and parsed on demand, so a malformed value never breaks loading.
    """
    id: str
    title: str
    description: Optional[str] = None
    classification_id: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIA
    status: TaskStatus = TaskStatus.PENDENTE
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None
    delegated_by: Optional[str] = None
    created_at: TimestampLike = None
    updated_at: TimestampLike = None
    due_date: TimestampLike = None
    completed_at: TimestampLike = None
    is_project: bool = False
    project_id: Optional[str] = None
    comments: List[str] = field(default_factory=list)

    # pre-joined relations
    classification: Optional[TaskClassification] = None
    created_by_profile: Optional[Profile] = None
    assigned_to_profile: Optional[Profile] = None
    delegated_by_profile: Optional[Profile] = None

    @property
    def is_activity(self) -> bool:
        return self.project_id is not None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.CONCLUIDA

    @property
    def classification_name(self) -> Optional[str]:
        if self.classification and self.classification.name:
            return self.classification.name
        return None

    @property
    def created_at_dt(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    @property
    def due_date_dt(self) -> Optional[datetime]:
        return parse_timestamp(self.due_date)

    @property
    def completed_at_dt(self) -> Optional[datetime]:
        return parse_timestamp(self.completed_at)

    def is_overdue(self, now: datetime) -> bool:
        """Computed overdue flag, independent of the stored ATRASADA status"""
        if self.is_completed:
            return False
        due = self.due_date_dt
        return due is not None and due < now

    def first_comment(self) -> Optional[str]:
        return self.comments[0] if self.comments else None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "classification_id": self.classification_id,
            "priority": self.priority.value,
            "status": self.status.value,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "delegated_by": self.delegated_by,
            "is_project": self.is_project,
            "project_id": self.project_id,
            "comments": list(self.comments),
        }
        for name in _TIMESTAMP_FIELDS:
            value = getattr(self, name)
            data[name] = value.isoformat() if isinstance(value, (datetime, date)) else value

        if self.classification is not None:
            data["classification"] = self.classification.to_dict()
        for name in _PROFILE_FIELDS:
            profile = getattr(self, name)
            if profile is not None:
                data[name] = profile.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        classification = data.get("classification")
        profiles = {
            name: Profile.from_dict(data[name]) if data.get(name) else None
            for name in _PROFILE_FIELDS
        }
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description"),
            classification_id=data.get("classification_id"),
            priority=coerce_enum(TaskPriority, data.get("priority") or TaskPriority.MEDIA.value, "priority"),
            status=coerce_enum(TaskStatus, data.get("status") or TaskStatus.PENDENTE.value, "status"),
            created_by=data.get("created_by"),
            assigned_to=data.get("assigned_to"),
            delegated_by=data.get("delegated_by"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            due_date=data.get("due_date"),
            completed_at=data.get("completed_at"),
            is_project=bool(data.get("is_project", False)),
            project_id=data.get("project_id"),
            comments=list(data.get("comments") or []),
            classification=TaskClassification.from_dict(classification) if classification else None,
            **profiles,
        )
