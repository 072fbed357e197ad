"""
Task Models

Task payloads and the stored task representation, plus the two
enumerations that constrain a task:

- TaskPriority: low / medium / high
- TaskStatus: pending / in_progress / completed, arranged as a ring
  for the "cycle status" action
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        """Display order: pending first, completed last."""
        return STATUS_ORDER.index(self)

    def next(self) -> "TaskStatus":
        """Next status on the ring; completed wraps back to pending."""
        return STATUS_ORDER[(self.rank + 1) % len(STATUS_ORDER)]


STATUS_ORDER = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)
PRIORITY_ORDER = (TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH)


def next_status(status) -> TaskStatus:
    """Cycle action for a status given as enum or raw string."""
    return TaskStatus(status).next()


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TaskCreate(BaseModel):
    """Payload for creating a task. Unknown fields (including owner) are ignored."""
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    category: Optional[str] = Field(default=None, max_length=100)

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("category")
    @classmethod
    def _clean_category(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)


class TaskUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied
    (see ``changes``); identifier and owner can never be changed.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    category: Optional[str] = Field(default=None, max_length=100)

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("Title cannot be null")
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("due_date", "priority", "status", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("category")
    @classmethod
    def _clean_category(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)

    def changes(self) -> dict:
        """Column values for the fields the caller actually sent."""
        values = self.model_dump(exclude_unset=True)
        for key in ("priority", "status"):
            if key in values:
                values[key] = values[key].value
        return values


class Task(BaseModel):
    """A stored task."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    category: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
