# models/profile.py

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional

from models.enums import UserRole, coerce_enum


@dataclass
class Profile:
    """Read-only user profile, used to resolve assignee names"""
    id: str
    name: str
    role: UserRole = UserRole.USUARIO
    sector: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        # store rows reference users by user_id; minimal listings only carry id
        profile_id = data.get("user_id") or data.get("id")
        return cls(
            id=str(profile_id),
            name=data.get("name") or "",
            role=coerce_enum(UserRole, data.get("role") or UserRole.USUARIO.value, "role"),
            sector=data.get("sector"),
            email=data.get("email"),
        )


class ProfileDirectory:
    """Id -> profile lookup"""

    def __init__(self, profiles: Optional[Iterable[Profile]] = None):
        self._profiles: Dict[str, Profile] = {}
        for profile in profiles or []:
            self._profiles[profile.id] = profile

    def get(self, profile_id: Optional[str]) -> Optional[Profile]:
        if profile_id is None:
            return None
        return self._profiles.get(profile_id)

    def display_name(self, profile_id: Optional[str]) -> Optional[str]:
        profile = self.get(profile_id)
        return profile.name if profile else None

    def assignee_name(self, task) -> Optional[str]:
        """Display name of a task's assignee, preferring the pre-joined profile"""
        if task.assigned_to_profile is not None and task.assigned_to_profile.name:
            return task.assigned_to_profile.name
        return self.display_name(task.assigned_to)
