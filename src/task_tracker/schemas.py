from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dashboard import Summary
from .models import DueDateInput, Filter, Page, Priority, SortKey, Task, Theme, parse_due_date


# PUBLIC_INTERFACE
class TaskPatch(BaseModel):
    """
    Partial change to an existing Task.
    Only provided fields are applied; an explicit null dueDate clears the deadline.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"text": "Buy groceries and supplies", "priority": "High", "dueDate": "2025-02-02"}
        },
    )

    text: Optional[str] = Field(default=None, description="New text; blank values are ignored")
    priority: Optional[Priority] = Field(default=None, description="New priority")
    due_date: Optional[date] = Field(default=None, alias="dueDate", description="New due date or null")

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Optional[DueDateInput]) -> Optional[date]:
        return parse_due_date(v)

    @property
    def clears_due_date(self) -> bool:
        return self.due_date is None and "due_date" in self.model_fields_set


# PUBLIC_INTERFACE
class TaskCreateIn(BaseModel):
    """
    Request body for creating a task.
    Text is validated by the store: blank text creates nothing.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"text": "Buy groceries", "priority": "Medium", "dueDate": "2025-02-01"}},
    )

    text: str = Field(default="", description="Task text")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: Optional[date] = Field(default=None, alias="dueDate", description="Optional due date")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Optional[DueDateInput]) -> Optional[date]:
        return parse_due_date(v)


class EditBufferIn(BaseModel):
    text: str = Field(..., description="Current contents of the edit buffer")


class UiUpdateIn(BaseModel):
    """Any subset of the view controls."""

    filter: Optional[Filter] = None
    search: Optional[str] = None
    sort: Optional[SortKey] = None
    page: Optional[Page] = None


class EditingOut(BaseModel):
    id: int
    buffer: str


class UiStateOut(BaseModel):
    filter: Filter
    search: str
    sort: SortKey
    page: Page
    theme: Theme
    pending_delete_id: Optional[int] = Field(default=None, description="Task awaiting delete confirmation")
    editing: Optional[EditingOut] = Field(default=None, description="Edit session in progress")


# PUBLIC_INTERFACE
class Snapshot(BaseModel):
    """
    Everything a client needs to render the current screen.
    """

    view: List[Task] = Field(..., description="Filtered, searched and sorted tasks")
    summary: Summary = Field(..., description="Dashboard aggregates over all tasks")
    ui: UiStateOut = Field(..., description="Current view controls and workflow state")
    has_completed: bool = Field(..., description="Whether any task can be cleared as completed")
