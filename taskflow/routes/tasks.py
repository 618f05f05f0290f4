"""Task list routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..deps import get_task_service
from ..models.task import Task, TaskFilter, TaskOrder, TaskStats
from ..schemas import TaskCompletionUpdate, TaskCreate, TaskListResponse
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(task_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Task {task_id} not found"
    )


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Create a new task.

    Raises:
        HTTPException: 400 if the description is blank or the priority unknown
    """
    try:
        logger.info(f"Creating new task: {task_data.description}")
        return task_service.add_task(task_data.description, task_data.priority)

    except ValueError as e:
        logger.error(f"Validation error creating task: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/", response_model=TaskListResponse)
async def list_tasks(
    view: TaskFilter = Query(TaskFilter.ALL, description="Named filter"),
    order: TaskOrder = Query(TaskOrder.DISPLAY, description="Result ordering"),
    q: Optional[str] = Query(None, description="Search term"),
    task_service: TaskService = Depends(get_task_service)
) -> TaskListResponse:
    """List tasks in a view, optionally searched and ordered."""
    logger.debug(f"Listing tasks: view={view.value}, order={order.value}, q={q!r}")

    tasks = task_service.list_tasks(view=view, order=order, search=q)

    return TaskListResponse(
        tasks=tasks,
        total=len(tasks),
        pending=task_service.get_pending_count()
    )


@router.get("/search/", response_model=List[Task])
async def search_tasks(
    q: str = Query("", description="Search query; empty returns every task"),
    task_service: TaskService = Depends(get_task_service)
) -> List[Task]:
    """Search task descriptions."""
    logger.debug(f"Searching tasks with query: {q!r}")
    return task_service.search_tasks(q)


@router.get("/stats/", response_model=TaskStats)
async def get_task_statistics(
    task_service: TaskService = Depends(get_task_service)
) -> TaskStats:
    """Get task statistics."""
    logger.debug("Getting task statistics")
    return task_service.get_statistics()


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Get a specific task by ID."""
    task = task_service.get_task(task_id)
    if task is None:
        raise _not_found(task_id)
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task_completion(
    task_id: int,
    update: TaskCompletionUpdate,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Mark a task completed or pending."""
    logger.info(f"Updating task {task_id}: completed={update.completed}")

    task = task_service.set_completion(task_id, update.completed)
    if task is None:
        raise _not_found(task_id)
    return task


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Flip a task between completed and pending."""
    logger.info(f"Toggling task {task_id}")

    task = task_service.toggle_task(task_id)
    if task is None:
        raise _not_found(task_id)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete a task."""
    logger.info(f"Deleting task: {task_id}")

    if not task_service.remove_task(task_id):
        raise _not_found(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
