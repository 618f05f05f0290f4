"""Task store: owns the current task collection and persists it."""

import logging
from threading import Lock
from typing import Any, Iterable, List, Optional

from ..config import Settings
from ..models.task import Priority, Task, TaskFilter, TaskOrder, TaskStats
from . import task_operations as ops
from .storage import TaskStorage

logger = logging.getLogger(__name__)


class TaskService:
    """Holds the current collection and applies operations to it.

    Each mutation replaces the collection with the list returned by the
    corresponding pure operation and then writes a full snapshot when a
    storage is configured.
    """

    def __init__(
        self,
        storage: Optional[TaskStorage] = None,
        tasks: Iterable[Task] = ()
    ):
        """Initialize the task service.

        Args:
            storage: Optional snapshot storage used by load() and after mutations
            tasks: Initial collection
        """
        self._tasks: List[Task] = list(tasks)
        self._storage = storage
        self._lock = Lock()
        logger.info(
            f"Task service initialized with {'file' if storage else 'in-memory'} storage"
        )

    def load(self) -> int:
        """Replace the current collection with the stored snapshot.

        Returns:
            Number of tasks loaded
        """
        if self._storage is None:
            return len(self._tasks)

        tasks = self._storage.load()
        with self._lock:
            self._tasks = tasks
        return len(tasks)

    def _commit(self, tasks: List[Task]) -> None:
        # Caller holds the lock.
        if self._storage is not None:
            self._storage.save(tasks)
        self._tasks = tasks

    def get_tasks(self) -> List[Task]:
        """Return a copy of the current collection."""
        with self._lock:
            return list(self._tasks)

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        """Replace the current collection."""
        with self._lock:
            self._commit(list(tasks))
            logger.info(f"Replaced task collection ({len(self._tasks)} tasks)")

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            task = ops.find_task(self._tasks, task_id)
        if task is None:
            logger.debug(f"Task {task_id} not found")
        return task

    def add_task(self, description: Any, priority: Any = Priority.MEDIUM) -> Task:
        """Create a task and append it to the collection.

        Args:
            description: Task description
            priority: Task priority

        Returns:
            Created task

        Raises:
            TaskValidationError: If description or priority is invalid
        """
        with self._lock:
            tasks = ops.add_task(self._tasks, description, priority)
            self._commit(tasks)
            task = tasks[-1]

        logger.info(f"Created task {task.id}: {task.description}")
        return task

    def set_completion(self, task_id: int, completed: bool = True) -> Optional[Task]:
        """Set a task's completion flag.

        Returns:
            Updated task if found, None otherwise
        """
        with self._lock:
            if ops.find_task(self._tasks, task_id) is None:
                logger.warning(f"Task {task_id} not found for completion update")
                return None

            tasks = ops.toggle_task_completion(self._tasks, task_id, completed)
            self._commit(tasks)
            task = ops.find_task(tasks, task_id)

        logger.info(f"Task {task_id} marked {'completed' if completed else 'pending'}")
        return task

    def toggle_task(self, task_id: int) -> Optional[Task]:
        """Flip a task's completion flag.

        Returns:
            Updated task if found, None otherwise
        """
        with self._lock:
            current = ops.find_task(self._tasks, task_id)
            if current is None:
                logger.warning(f"Task {task_id} not found for toggle")
                return None

            tasks = ops.toggle_task_completion(self._tasks, task_id, not current.completed)
            self._commit(tasks)
            task = ops.find_task(tasks, task_id)

        logger.info(f"Toggled task {task_id}: completed={task.completed}")
        return task

    def remove_task(self, task_id: int) -> bool:
        """Remove a task.

        Returns:
            True if the task was removed, False if not found
        """
        with self._lock:
            tasks = ops.remove_task(self._tasks, task_id)
            if len(tasks) == len(self._tasks):
                logger.warning(f"Task {task_id} not found for deletion")
                return False
            self._commit(tasks)

        logger.info(f"Deleted task {task_id}")
        return True

    def list_tasks(
        self,
        view: TaskFilter = TaskFilter.ALL,
        order: TaskOrder = TaskOrder.DISPLAY,
        search: Optional[str] = None
    ) -> List[Task]:
        """List tasks in a view.

        Args:
            view: Named filter to apply
            order: Ordering of the result
            search: Optional search term applied after the filter

        Returns:
            Tasks matching the view and search term
        """
        with self._lock:
            tasks = ops.apply_filter(self._tasks, view)

        tasks = ops.search_tasks(tasks, search)

        if order == TaskOrder.DISPLAY:
            tasks = ops.sort_for_display(tasks)
        elif order == TaskOrder.PRIORITY:
            tasks = ops.sort_by_priority(tasks)
        elif order == TaskOrder.DATE:
            tasks = ops.sort_by_date(tasks)

        logger.debug(f"Listed {len(tasks)} tasks (view={view}, order={order}, search={search!r})")
        return tasks

    def search_tasks(self, term: Optional[str]) -> List[Task]:
        """Search descriptions; a blank term returns every task."""
        with self._lock:
            tasks = ops.search_tasks(self._tasks, term)
        logger.debug(f"Found {len(tasks)} tasks matching query: {term!r}")
        return tasks

    def get_statistics(self) -> TaskStats:
        with self._lock:
            return ops.get_task_stats(self._tasks)

    def get_pending_count(self) -> int:
        with self._lock:
            return len(ops.get_pending_tasks(self._tasks))


# Application-wide task service, initialized during app startup
_task_service: Optional[TaskService] = None


def get_task_service() -> Optional[TaskService]:
    """Get the global task service instance.

    Returns:
        Task service instance or None if not initialized
    """
    return _task_service


def initialize_task_service(settings: Settings) -> TaskService:
    """Initialize the global task service from settings.

    Loads the stored snapshot when persistence is enabled.

    Returns:
        Initialized task service
    """
    global _task_service
    storage = TaskStorage(settings.tasks_file) if settings.persist_tasks else None
    service = TaskService(storage=storage)
    service.load()
    _task_service = service
    return _task_service
