# services/progress.py

from fractions import Fraction
from math import floor
from typing import Iterable, Sequence, Union

from models.task import Task

Number = Union[int, Fraction]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero"""
    value = Fraction(value)
    if value < 0:
        return -floor(-value + Fraction(1, 2))
    return floor(value + Fraction(1, 2))


def percent(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(Fraction(100 * part, total))


def activity_progress(activity: Task) -> int:
    return 100 if activity.is_completed else 0


def project_progress(project: Task, activities: Sequence[Task]) -> int:
    """Share of completed activities; a childless project is all or nothing"""
    if activities:
        completed = sum(1 for activity in activities if activity.is_completed)
        return percent(completed, len(activities))
    return 100 if project.is_completed else 0


def group_progress(progress_values: Iterable[int]) -> int:
    values = list(progress_values)
    if not values:
        return 0
    return round_half_up(Fraction(sum(values), len(values)))
