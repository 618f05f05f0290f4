"""Pure operations over task collections.

Every function takes a sequence of tasks and returns a new list (or a derived
value). Inputs are never mutated; tasks themselves are frozen, so a changed
task is always a copy.
"""

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from ..models.task import Priority, Task, TaskFilter, TaskStats
from ..utils.exceptions import EmptyDescriptionError, InvalidPriorityError

logger = logging.getLogger(__name__)


def _parse_priority(priority: Any) -> Optional[Priority]:
    try:
        return Priority(priority)
    except ValueError:
        return None


def generate_task_id(tasks: Sequence[Task]) -> int:
    """Generate an id not used by any task in the collection.

    Candidates are the current epoch milliseconds plus a random offset; a
    candidate already present in the collection is discarded and redrawn.
    """
    existing = {task.id for task in tasks}
    while True:
        task_id = int(time.time() * 1000) + random.randrange(1000)
        if task_id not in existing:
            return task_id


def add_task(
    tasks: Sequence[Task],
    description: Any,
    priority: Any = Priority.MEDIUM,
    *,
    now: Optional[datetime] = None
) -> List[Task]:
    """Append a new pending task.

    Args:
        tasks: Current collection
        description: Task description, trimmed before storing
        priority: A Priority or anything Priority() accepts
        now: Creation instant, defaults to the current UTC time

    Returns:
        New collection with the task appended

    Raises:
        EmptyDescriptionError: If description is missing or blank
        InvalidPriorityError: If priority is not recognized
    """
    if not isinstance(description, str) or not description.strip():
        raise EmptyDescriptionError()

    parsed = _parse_priority(priority)
    if parsed is None:
        raise InvalidPriorityError(priority, [p.value for p in Priority])

    task = Task(
        id=generate_task_id(tasks),
        description=description.strip(),
        priority=parsed,
        completed=False,
        created_at=now or datetime.now(timezone.utc),
    )
    logger.debug(f"Adding task {task.id} ({task.priority.value}): {task.description}")
    return [*tasks, task]


def toggle_task_completion(
    tasks: Sequence[Task], task_id: int, completed: bool = True
) -> List[Task]:
    """Set the completion flag of one task. Unknown ids leave the collection as is."""
    return [
        task.model_copy(update={"completed": completed}) if task.id == task_id else task
        for task in tasks
    ]


def filter_by_status(tasks: Sequence[Task], completed: bool) -> List[Task]:
    return [task for task in tasks if task.completed == completed]


def filter_by_priority(tasks: Sequence[Task], priority: Any) -> List[Task]:
    """Tasks with the given priority; an unrecognized priority matches nothing."""
    parsed = _parse_priority(priority)
    if parsed is None:
        return []
    return [task for task in tasks if task.priority == parsed]


def get_pending_tasks(tasks: Sequence[Task]) -> List[Task]:
    return filter_by_status(tasks, False)


def get_completed_tasks(tasks: Sequence[Task]) -> List[Task]:
    return filter_by_status(tasks, True)


def sort_by_priority(tasks: Sequence[Task]) -> List[Task]:
    """Highest priority first. Ties keep their input order."""
    return sorted(tasks, key=lambda task: task.priority.weight, reverse=True)


def sort_by_date(tasks: Sequence[Task]) -> List[Task]:
    """Newest first. Ties keep their input order."""
    return sorted(tasks, key=lambda task: task.created_at, reverse=True)


def sort_for_display(tasks: Sequence[Task]) -> List[Task]:
    """Pending before completed, then by priority, then newest first."""
    return sorted(
        tasks,
        key=lambda task: (
            task.completed,
            -task.priority.weight,
            -task.created_at.timestamp(),
        ),
    )


def remove_task(tasks: Sequence[Task], task_id: int) -> List[Task]:
    return [task for task in tasks if task.id != task_id]


def find_task(tasks: Sequence[Task], task_id: int) -> Optional[Task]:
    return next((task for task in tasks if task.id == task_id), None)


def get_task_stats(tasks: Sequence[Task]) -> TaskStats:
    """Compute aggregate counts.

    ``completion_rate`` is a percentage rounded to one decimal, 0.0 for an
    empty collection. ``by_priority`` only lists priorities that occur, in
    order of first appearance.
    """
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)

    by_priority = {}
    for task in tasks:
        key = task.priority.value
        by_priority[key] = by_priority.get(key, 0) + 1

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        completion_rate=round(completed / total * 100, 1) if total > 0 else 0.0,
        by_priority=by_priority,
    )


def search_tasks(tasks: Sequence[Task], term: Any) -> List[Task]:
    """Case-insensitive substring search over descriptions.

    A missing, non-string or blank term returns the whole collection.
    """
    if not isinstance(term, str) or not term.strip():
        return list(tasks)

    needle = term.strip().lower()
    return [task for task in tasks if needle in task.description.lower()]


def get_tasks_by_priority(
    tasks: Sequence[Task], completed: Optional[bool] = None
) -> List[Task]:
    """Optionally filter by status, then sort by priority."""
    if isinstance(completed, bool):
        tasks = filter_by_status(tasks, completed)
    return sort_by_priority(tasks)


def apply_filter(tasks: Sequence[Task], view: TaskFilter) -> List[Task]:
    """Tasks visible in a named list view."""
    view = TaskFilter(view)
    if view == TaskFilter.HIGH:
        return filter_by_priority(tasks, Priority.HIGH)
    if view == TaskFilter.MEDIUM:
        return filter_by_priority(tasks, Priority.MEDIUM)
    if view == TaskFilter.LOW:
        return filter_by_priority(tasks, Priority.LOW)
    if view == TaskFilter.COMPLETED:
        return get_completed_tasks(tasks)
    if view == TaskFilter.PENDING:
        return get_pending_tasks(tasks)
    return list(tasks)
