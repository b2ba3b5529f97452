# services/sorting.py

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from models.enums import coerce_enum
from services.metrics import RowMetrics
from utils.text_utils import collation_key

T = TypeVar("T")


class SortKey(str, Enum):
    TITLE = "title"
    ASSIGNEE_NAME = "assignee_name"
    START_DATE = "start_date"
    BUSINESS_DAYS = "business_days"
    CALENDAR_DAYS = "calendar_days"
    END_DATE = "end_date"
    PROGRESS = "progress"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_KEY_FUNCTIONS: Dict[SortKey, Callable[[RowMetrics], Any]] = {
    SortKey.TITLE: lambda m: collation_key(m.title),
    SortKey.ASSIGNEE_NAME: lambda m: collation_key(m.assignee_name),
    SortKey.START_DATE: lambda m: m.start,
    SortKey.BUSINESS_DAYS: lambda m: m.business_days,
    SortKey.CALENDAR_DAYS: lambda m: m.calendar_days,
    SortKey.END_DATE: lambda m: m.end,
    SortKey.PROGRESS: lambda m: m.progress,
    SortKey.STATUS: lambda m: collation_key(m.status.value),
}


@dataclass(frozen=True)
class SortState:
    """Selected sort key and direction; no key keeps input order"""
    key: Optional[SortKey] = None
    direction: SortDirection = SortDirection.ASC

    def toggle(self, key) -> "SortState":
        """Same key flips direction, a new key starts ascending"""
        key = coerce_enum(SortKey, key, "sort key")
        if key == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return replace(self, direction=flipped)
        return SortState(key=key, direction=SortDirection.ASC)

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "key": self.key.value if self.key else None,
            "direction": self.direction.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SortState":
        data = data or {}
        key = data.get("key")
        return cls(
            key=coerce_enum(SortKey, key, "sort key") if key else None,
            direction=coerce_enum(SortDirection, data.get("direction") or SortDirection.ASC.value, "direction"),
        )


def sort_rows(
    rows: Sequence[T],
    state: SortState,
    metrics_of: Callable[[T], RowMetrics] = lambda row: row.metrics,
) -> List[T]:
    """Stable sort of the rows of one group; ties keep their prior order"""
    if state.key is None:
        return list(rows)
    key_function = _KEY_FUNCTIONS[state.key]
    return sorted(rows, key=lambda row: key_function(metrics_of(row)), reverse=state.descending)
