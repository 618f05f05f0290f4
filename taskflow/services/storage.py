"""JSON snapshot persistence for task collections.

The whole collection is written on every save and read back on start.
Records use camelCase field names (``createdAt``). Snapshots written by the
browser version of the app used Portuguese keys; those are migrated on load.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from ..models.task import Task
from ..utils.exceptions import TaskStorageError

logger = logging.getLogger(__name__)

LEGACY_KEYS: Dict[str, str] = {
    "descricao": "description",
    "prioridade": "priority",
    "concluida": "completed",
    "dataCriacao": "createdAt",
}

_task_list = TypeAdapter(List[Task])


def _migrate_record(record: Dict[str, Any]) -> Dict[str, Any]:
    migrated = dict(record)
    for old_key, new_key in LEGACY_KEYS.items():
        if old_key in migrated and new_key not in migrated:
            migrated[new_key] = migrated.pop(old_key)
    return migrated


class TaskStorage:
    """Load and save a task collection as a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Task]:
        """Read the stored collection.

        Returns:
            Stored tasks in their saved order; empty if no file exists

        Raises:
            TaskStorageError: If the file cannot be read, is not valid JSON,
                or holds invalid or duplicate records
        """
        if not self.path.exists():
            logger.info(f"No task snapshot at {self.path}, starting empty")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise TaskStorageError(str(self.path), f"invalid JSON ({e})") from e
        except UnicodeDecodeError as e:
            raise TaskStorageError(str(self.path), f"not UTF-8 text ({e.reason})") from e
        except OSError as e:
            raise TaskStorageError(str(self.path), e.strerror or str(e)) from e

        if not isinstance(data, list):
            raise TaskStorageError(str(self.path), "expected a JSON array of tasks")

        records = [_migrate_record(r) if isinstance(r, dict) else r for r in data]
        try:
            tasks = _task_list.validate_python(records)
        except ValidationError as e:
            raise TaskStorageError(str(self.path), f"invalid task record ({e.error_count()} errors)") from e

        seen = set()
        for task in tasks:
            if task.id in seen:
                raise TaskStorageError(str(self.path), f"duplicate task id {task.id}")
            seen.add(task.id)

        logger.info(f"Loaded {len(tasks)} tasks from {self.path}")
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        """Write the whole collection, replacing any previous snapshot.

        Raises:
            TaskStorageError: If the file or its directory cannot be written
        """
        payload = _task_list.dump_python(list(tasks), mode="json", by_alias=True)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=4, ensure_ascii=False)
        except OSError as e:
            raise TaskStorageError(str(self.path), e.strerror or str(e), action="save") from e
        logger.debug(f"Saved {len(payload)} tasks to {self.path}")
