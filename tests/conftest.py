"""Shared test fixtures and configuration for the test suite."""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, List
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add the parent directory to the path for imports
import sys

sys.path.append(str(Path(__file__).parent.parent))

from taskflow.config import Settings
from taskflow.main import create_app
from taskflow.models.task import Priority, Task
from taskflow.services.storage import TaskStorage
from taskflow.services.task_service import TaskService


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Create test settings with temporary directories."""
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)

        yield Settings(
            tasks_file=temp_path / "data" / "tasks.json",
            persist_tasks=True,
            log_level="DEBUG",
            log_dir=temp_path / "logs",
            environment="test",
        )


@pytest.fixture
def task_service() -> TaskService:
    """Create an in-memory task service instance for testing."""
    return TaskService()


@pytest.fixture
def storage(tmp_path: Path) -> TaskStorage:
    """Create a task storage backed by a temporary file."""
    return TaskStorage(tmp_path / "tasks.json")


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with patch("taskflow.main.get_settings", return_value=test_settings):
        app = create_app()
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def sample_tasks() -> List[Task]:
    """Three tasks with distinct priorities and creation dates, oldest first."""
    return [
        Task(
            id=1,
            description="Atualizar dependências do projeto",
            priority=Priority.LOW,
            created_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        ),
        Task(
            id=2,
            description="Revisar código do módulo de pagamentos",
            priority=Priority.HIGH,
            created_at=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        ),
        Task(
            id=3,
            description="Criar documentação da API",
            priority=Priority.MEDIUM,
            created_at=datetime(2024, 12, 1, 10, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def sample_task_data():
    """Sample task payload for API tests."""
    return {"description": "Implementar autenticação", "priority": "alta"}
