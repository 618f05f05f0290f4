"""Domain models for the task list."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    """Task priority.

    Values are the ones found in persisted task lists. English names are
    accepted when parsing, e.g. ``Priority("high") is Priority.HIGH``.
    """
    HIGH = "alta"
    MEDIUM = "média"
    LOW = "baixa"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        if key == "media":
            return cls.MEDIUM
        return None

    @property
    def weight(self) -> int:
        """Numeric rank used for sorting (high=3, medium=2, low=1)."""
        return PRIORITY_WEIGHTS[self]


PRIORITY_WEIGHTS: Dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TaskFilter(str, Enum):
    """Named list views."""
    ALL = "all"
    HIGH = "p-alta"
    MEDIUM = "p-media"
    LOW = "p-baixa"
    COMPLETED = "completed"
    PENDING = "pending"


class TaskOrder(str, Enum):
    """Ordering applied to a task list view."""
    DISPLAY = "display"
    PRIORITY = "priority"
    DATE = "date"
    INSERTION = "insertion"


class Task(BaseModel):
    """A single to-do record.

    Tasks are frozen; operations that change completion build a copy.
    """

    id: int = Field(..., description="Unique task identifier")
    description: str = Field(..., min_length=1, description="Task description")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    completed: bool = Field(default=False, description="Completion flag")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Task creation timestamp"
    )

    class Config:
        """Pydantic configuration."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TaskStats(BaseModel):
    """Aggregate counts over a task collection."""

    total: int = Field(..., ge=0, description="Number of tasks")
    completed: int = Field(..., ge=0, description="Number of completed tasks")
    pending: int = Field(..., ge=0, description="Number of pending tasks")
    completion_rate: float = Field(..., description="Completed share in percent, one decimal")
    by_priority: Dict[str, int] = Field(
        default_factory=dict,
        description="Task count per priority present in the collection"
    )

    class Config:
        """Pydantic configuration."""
        alias_generator = to_camel
        populate_by_name = True
