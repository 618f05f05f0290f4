"""API request/response schemas for the task list."""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field

from .models.task import Priority, Task


class TaskCreate(BaseModel):
    """Schema for creating a new task.

    Fields are deliberately loose; description and priority are validated by
    the task operations so the API reports the same errors as the library.
    """
    description: str = Field(..., description="Task description")
    priority: str = Field(default=Priority.MEDIUM.value, description="Task priority (alta, média, baixa)")


class TaskCompletionUpdate(BaseModel):
    """Schema for setting a task's completion flag."""
    completed: bool = Field(default=True, description="New completion flag")


class TaskListResponse(BaseModel):
    """Schema for task list API responses."""
    tasks: List[Task] = Field(..., description="Tasks in the requested view")
    total: int = Field(..., description="Number of tasks in the view")
    pending: int = Field(..., description="Pending tasks in the whole collection")


class HealthResponse(BaseModel):
    """Schema for health check responses."""
    status: str = Field(default="healthy", description="Service health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Health check timestamp")
    version: str = Field(default="1.0.0", description="Application version")
    task_service: str = Field(..., description="Task service state")
