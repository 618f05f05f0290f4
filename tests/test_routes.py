"""Tests for the task HTTP routes and app-level endpoints."""

import json
from unittest.mock import patch

from fastapi.testclient import TestClient

from taskflow.main import create_app
from taskflow.services.task_service import get_task_service


class TestTaskRoutes:
    """Test task API endpoints."""

    def test_create_task_success(self, client, sample_task_data):
        """Test successful task creation via API."""
        response = client.post("/tasks/", json=sample_task_data)

        assert response.status_code == 201
        data = response.json()
        assert data["description"] == "Implementar autenticação"
        assert data["priority"] == "alta"
        assert data["completed"] is False
        assert "createdAt" in data
        assert isinstance(data["id"], int)

    def test_create_task_default_priority(self, client):
        """Test creation without a priority."""
        response = client.post("/tasks/", json={"description": "Tarefa"})

        assert response.status_code == 201
        assert response.json()["priority"] == "média"

    def test_create_task_empty_description(self, client):
        """Test creation with a blank description."""
        response = client.post("/tasks/", json={"description": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Task description is required"

    def test_create_task_invalid_priority(self, client):
        """Test creation with an unknown priority."""
        response = client.post("/tasks/", json={"description": "Tarefa", "priority": "urgente"})

        assert response.status_code == 400
        assert "Invalid priority" in response.json()["error"]

    def test_create_task_missing_body_field(self, client):
        """Test request validation errors."""
        response = client.post("/tasks/", json={"priority": "alta"})

        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"

    def test_create_task_is_persisted(self, client, test_settings, sample_task_data):
        """Test that created tasks are written to the snapshot file."""
        client.post("/tasks/", json=sample_task_data)

        stored = json.loads(test_settings.tasks_file.read_text(encoding="utf-8"))
        assert [t["description"] for t in stored] == ["Implementar autenticação"]

    def test_list_tasks(self, client):
        """Test listing in display order with counts."""
        low = client.post("/tasks/", json={"description": "Tarefa baixa", "priority": "baixa"}).json()
        high = client.post("/tasks/", json={"description": "Tarefa alta", "priority": "alta"}).json()
        client.patch(f"/tasks/{high['id']}", json={"completed": True})

        response = client.get("/tasks/")

        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["tasks"]] == [low["id"], high["id"]]
        assert data["total"] == 2
        assert data["pending"] == 1

    def test_list_tasks_with_view(self, client):
        """Test listing a named view."""
        client.post("/tasks/", json={"description": "Tarefa 1", "priority": "alta"})
        client.post("/tasks/", json={"description": "Tarefa 2", "priority": "baixa"})

        response = client.get("/tasks/?view=p-alta&order=priority")

        data = response.json()
        assert data["total"] == 1
        assert data["tasks"][0]["description"] == "Tarefa 1"
        assert data["pending"] == 2

    def test_list_tasks_with_search(self, client):
        """Test listing with a search term."""
        client.post("/tasks/", json={"description": "Implementar pagamentos"})
        client.post("/tasks/", json={"description": "Criar documentação"})

        data = client.get("/tasks/?q=PAGAMENTOS").json()

        assert [t["description"] for t in data["tasks"]] == ["Implementar pagamentos"]

    def test_list_tasks_invalid_view(self, client):
        """Test that unknown views are rejected."""
        response = client.get("/tasks/?view=urgent")

        assert response.status_code == 422

    def test_get_task(self, client, sample_task_data):
        """Test retrieving a task by id."""
        created = client.post("/tasks/", json=sample_task_data).json()

        response = client.get(f"/tasks/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_task_not_found(self, client):
        """Test retrieving a missing task."""
        response = client.get("/tasks/99999")

        assert response.status_code == 404
        assert response.json()["error"] == "Task 99999 not found"

    def test_update_task_completion(self, client, sample_task_data):
        """Test marking a task completed and pending."""
        created = client.post("/tasks/", json=sample_task_data).json()

        response = client.patch(f"/tasks/{created['id']}", json={"completed": True})
        assert response.status_code == 200
        assert response.json()["completed"] is True

        response = client.patch(f"/tasks/{created['id']}", json={"completed": False})
        assert response.json()["completed"] is False

    def test_update_task_not_found(self, client):
        """Test completion update of a missing task."""
        response = client.patch("/tasks/99999", json={"completed": True})

        assert response.status_code == 404

    def test_toggle_task(self, client, sample_task_data):
        """Test flipping the completion flag."""
        created = client.post("/tasks/", json=sample_task_data).json()

        assert client.post(f"/tasks/{created['id']}/toggle").json()["completed"] is True
        assert client.post(f"/tasks/{created['id']}/toggle").json()["completed"] is False
        assert client.post("/tasks/99999/toggle").status_code == 404

    def test_delete_task(self, client, sample_task_data):
        """Test task deletion."""
        created = client.post("/tasks/", json=sample_task_data).json()

        response = client.delete(f"/tasks/{created['id']}")
        assert response.status_code == 204

        response = client.delete(f"/tasks/{created['id']}")
        assert response.status_code == 404

    def test_search_tasks(self, client):
        """Test the search endpoint."""
        client.post("/tasks/", json={"description": "Revisar código"})
        client.post("/tasks/", json={"description": "Criar documentação"})

        matches = client.get("/tasks/search/?q=CÓDIGO").json()
        everything = client.get("/tasks/search/?q=").json()

        assert [t["description"] for t in matches] == ["Revisar código"]
        assert len(everything) == 2

    def test_get_task_statistics(self, client):
        """Test the statistics endpoint."""
        first = client.post("/tasks/", json={"description": "Tarefa 1", "priority": "alta"}).json()
        client.post("/tasks/", json={"description": "Tarefa 2", "priority": "média"})
        client.post("/tasks/", json={"description": "Tarefa 3", "priority": "alta"})
        client.patch(f"/tasks/{first['id']}", json={"completed": True})

        response = client.get("/tasks/stats/")

        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "completed": 1,
            "pending": 2,
            "completionRate": 33.3,
            "byPriority": {"alta": 2, "média": 1},
        }

    def test_get_task_statistics_empty(self, client):
        """Test statistics with no tasks."""
        data = client.get("/tasks/stats/").json()

        assert data["total"] == 0
        assert data["completionRate"] == 0


class TestAppEndpoints:
    """Test health and root endpoints."""

    def test_health_check(self, client):
        """Test the health endpoint after startup."""
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["task_service"] == "initialized"
        assert get_task_service() is not None

    def test_root(self, client):
        """Test the root endpoint."""
        data = client.get("/").json()

        assert data["name"] == "TaskFlow API"
        assert data["endpoints"]["tasks"] == "/tasks"

    def test_startup_loads_existing_snapshot(self, test_settings):
        """Test that the app serves tasks stored before startup."""
        test_settings.tasks_file.parent.mkdir(parents=True, exist_ok=True)
        test_settings.tasks_file.write_text(json.dumps([{
            "id": 1,
            "description": "Tarefa salva",
            "priority": "baixa",
            "completed": False,
            "createdAt": "2024-01-01T10:00:00Z",
        }]), encoding="utf-8")

        with patch("taskflow.main.get_settings", return_value=test_settings):
            with TestClient(create_app()) as client:
                data = client.get("/tasks/").json()

        assert [t["description"] for t in data["tasks"]] == ["Tarefa salva"]
