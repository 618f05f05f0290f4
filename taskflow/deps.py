"""Dependency injection helpers for FastAPI."""

from functools import lru_cache

from fastapi import HTTPException, status

from .config import Settings, settings
from .services.task_service import TaskService, get_task_service as current_task_service


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return settings


def get_task_service() -> TaskService:
    """Get the initialized task service or fail with 503."""
    service = current_task_service()
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Task service not initialized"
        )
    return service
