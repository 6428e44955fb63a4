from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

# Incoming due dates may be a date, a datetime or an ISO8601 string
DueDateInput = Union[date, datetime, str]


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Filter(str, Enum):
    ALL = "All"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class SortKey(str, Enum):
    DUE_DATE = "dueDate"
    PRIORITY = "priority"


class Page(str, Enum):
    LIST = "list"
    DASHBOARD = "dashboard"


PRIORITY_WEIGHTS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def priority_weight(value: Any) -> int:
    """Sort weight for a priority; unrecognized values weigh 0 and sort last."""
    try:
        return PRIORITY_WEIGHTS[Priority(value)]
    except ValueError:
        return 0


def priority_label(value: Any) -> str:
    """Display label for a priority, tolerating values outside the enum."""
    try:
        return Priority(value).value
    except ValueError:
        return "Uncategorized"


def parse_due_date(value: Optional[DueDateInput]) -> Optional[date]:
    """
    Normalize due date input into a calendar date.
    - None and blank strings mean "no deadline".
    - A datetime keeps only its date part.
    - Strings are parsed as an ISO date first, then as an ISO datetime.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return date.fromisoformat(s)
        except ValueError:
            try:
                return datetime.fromisoformat(s).date()
            except ValueError as e:
                raise ValueError(
                    "Invalid due date format. Use an ISO8601 date such as '2025-01-31'."
                ) from e

    raise ValueError("Invalid type for due date; expected date, datetime, or ISO8601 string.")


# PUBLIC_INTERFACE
class Task(BaseModel):
    """
    A single to-do item, the only persisted entity.

    Fields:
    - id: Unique integer identifier, assigned once at creation
    - text: Non-empty, trimmed description
    - completed: Completion flag
    - priority: High, Medium or Low
    - due_date: Optional calendar date, serialized as 'dueDate'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: StrictInt
    text: str = Field(..., min_length=1)
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = Field(default=None, alias="dueDate")

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Optional[DueDateInput]) -> Optional[date]:
        return parse_due_date(v)

    def to_record(self) -> dict:
        """Storage shape: {id, text, completed, priority, dueDate}."""
        return self.model_dump(mode="json", by_alias=True)
