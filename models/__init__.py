"""
Project Tracker - Models Package
Task, profile and enum definitions shared by the engine and the dashboard
"""

from .enums import (
    TaskPriority,
    TaskStatus,
    UserRole,
)

from .profile import (
    Profile,
    ProfileDirectory,
)

from .task import (
    TaskClassification,
    Task,
)

__all__ = [
    # Enums
    'TaskPriority',
    'TaskStatus',
    'UserRole',

    # Profiles
    'Profile',
    'ProfileDirectory',

    # Tasks
    'TaskClassification',
    'Task',
]
