"""
Exception hierarchy for TaskFlow.

Only task creation can fail during normal operation; every other collection
operation is total. Storage errors surface when a snapshot cannot
be read back or written.

Usage:
    from taskflow.utils.exceptions import TaskValidationError

    try:
        tasks = add_task(tasks, description, priority)
    except TaskValidationError as e:
        return {"error": e.to_dict()}
"""

from typing import Any, Dict, Optional


class TaskFlowError(Exception):
    """Base exception for all TaskFlow errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class TaskValidationError(TaskFlowError, ValueError):
    """Caller-correctable input error raised while creating a task."""


class EmptyDescriptionError(TaskValidationError):
    """Raised when a task description is missing or blank."""

    def __init__(self):
        super().__init__("Task description is required")


class InvalidPriorityError(TaskValidationError):
    """Raised when a priority is not one of the recognized values."""

    def __init__(self, priority: Any, allowed: Optional[list] = None):
        allowed = allowed or []
        super().__init__(
            f"Invalid priority {priority!r}. Use: {', '.join(allowed)}",
            details={"priority": str(priority), "allowed": allowed}
        )


class TaskStorageError(TaskFlowError):
    """Raised when a task snapshot cannot be loaded or saved."""

    def __init__(self, path: str, reason: str, action: str = "load"):
        super().__init__(
            f"Could not {action} tasks at {path}: {reason}",
            details={"path": path}
        )
