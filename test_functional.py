from datetime import date

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services import InMemoryRecordStore

TODAY = date(2024, 9, 3)


@pytest.fixture
def client():
    # Fresh in-memory store per test and a fixed "today"
    app = create_app(store=InMemoryRecordStore(), clock=lambda: TODAY)
    # Host header has to pass TrustedHostMiddleware
    return TestClient(app, base_url="http://localhost:8000")


def create_task(client, **fields):
    payload = {"title": "Task"}
    payload.update(fields)
    response = client.post("/tasks", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_and_read_task(client):
    """
    Full task lifecycle:
    1. create (POST /tasks)
    2. list (GET /tasks) and read one (GET /tasks/{id})
    3. update and delete
    """
    created = create_task(client, title="Funktionaler Test Task", description="Erstellt durch pytest",
                          priority="High", dueDate="2024-09-10", tags=["qa", "qa"])
    assert created["id"] == 1
    assert created["status"] == "To Do"
    assert created["dueDate"] == "2024-09-10"
    assert created["createdAt"] == "2024-09-03"
    assert created["tags"] == ["qa"]

    tasks = client.get("/tasks").json()
    assert [t["title"] for t in tasks] == ["Funktionaler Test Task"]
    assert client.get("/tasks/1").json()["priority"] == "High"

    updated = client.put("/tasks/1", json={"description": "changed"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Funktionaler Test Task"
    assert updated.json()["description"] == "changed"

    assert client.delete("/tasks/1").status_code == 200
    assert client.get("/tasks/1").status_code == 404


def test_task_status_workflow(client):
    task = create_task(client)
    done = client.post(f"/tasks/{task['id']}/status", json={"status": "Completed"})
    assert done.status_code == 200
    assert done.json()["completedAt"] == "2024-09-03"

    reopened = client.post(f"/tasks/{task['id']}/status", json={"status": "Blocked"})
    assert reopened.json()["completedAt"] is None

    assert client.post(f"/tasks/{task['id']}/status", json={"status": "Done"}).status_code == 422


def test_track_time(client):
    task = create_task(client)
    client.post(f"/tasks/{task['id']}/time", json={"hours": 1.5})
    response = client.post(f"/tasks/{task['id']}/time", json={"hours": 0.5})
    assert response.json()["actualTime"] == 2
    assert client.post(f"/tasks/{task['id']}/time", json={"hours": 0}).status_code == 422


def test_task_filters(client):
    create_task(client, title="Landing page", status="In Progress", projectId=1, assignee=4)
    create_task(client, title="Login bug", priority="Urgent")
    create_task(client, title="Docs", description="landing docs", projectId=1)

    def titles(**params):
        response = client.get("/tasks", params=params)
        assert response.status_code == 200
        return [t["title"] for t in response.json()]

    assert titles(search="landing") == ["Landing page", "Docs"]
    assert titles(projectId=1, status="To Do") == ["Docs"]
    assert titles(assignee=4) == ["Landing page"]
    assert titles(priority="Urgent") == ["Login bug"]
    assert titles(projectId="all", status="all") == ["Landing page", "Login bug", "Docs"]
    assert client.get("/tasks", params={"status": "Archived"}).status_code == 422


def test_bulk_status_update(client):
    for title in ("a", "b", "c"):
        create_task(client, title=title)
    response = client.post("/tasks/bulk-status", json={"taskIds": [1, 3, 42], "status": "Completed"})
    assert response.status_code == 200
    assert response.json() == {"succeeded": [1, 3], "failed": [42]}
    assert client.get("/tasks/3").json()["completedAt"] == "2024-09-03"
    assert client.get("/tasks/2").json()["status"] == "To Do"


def test_projects_membership_and_progress(client):
    project = client.post("/projects", json={"name": "Launch"}).json()
    assert project["color"] == "#3b82f6"
    pid = project["id"]
    create_task(client, title="one", projectId=pid)
    create_task(client, title="two", projectId=pid, status="Completed")
    create_task(client, title="elsewhere")

    tasks = client.get(f"/projects/{pid}/tasks").json()
    assert [t["title"] for t in tasks] == ["one", "two"]

    progress = client.get(f"/projects/{pid}/progress").json()
    assert progress == {"projectId": pid, "name": "Launch", "taskCount": 2,
                        "completedCount": 1, "progress": 50}

    # deleting the project keeps its tasks
    assert client.delete(f"/projects/{pid}").status_code == 200
    assert client.get("/tasks/1").json()["projectId"] == pid
    assert client.get(f"/projects/{pid}").status_code == 404


def test_calendar_endpoints(client):
    create_task(client, title="today", dueDate="2024-09-03")
    create_task(client, title="next month", dueDate="2024-10-02")
    create_task(client, title="undated")

    cells = client.get("/calendar/month", params={"year": 2024, "month": 9}).json()
    assert len(cells) == 35
    assert cells[0]["date"] == "2024-09-01"
    today_cell = next(c for c in cells if c["isToday"])
    assert today_cell["date"] == "2024-09-03"
    assert [t["title"] for t in today_cell["tasks"]] == ["today"]
    assert client.get("/calendar/month", params={"month": 13}).status_code == 422

    week = client.get("/calendar/week", params={"anchor": "2024-09-04"}).json()
    assert [t["title"] for t in week] == ["today"]
    assert [t["title"] for t in client.get("/calendar/day").json()] == ["today"]


def test_analytics_endpoints(client):
    client.post("/projects", json={"name": "P"})
    create_task(client, title="late", dueDate="2024-09-01", projectId=1)
    create_task(client, title="done", status="Completed", projectId=1)

    metrics = client.get("/analytics/metrics").json()
    assert metrics["total"] == 2
    assert metrics["completionRate"] == 50
    assert metrics["overdueCount"] == 1
    assert metrics["statusCounts"]["Completed"] == 1

    series = client.get("/analytics/productivity", params={"range": "7days"}).json()
    assert len(series) == 7
    assert series[-1] == {"date": "2024-09-03", "completedCount": 1, "createdCount": 2}

    top = client.get("/analytics/top-projects").json()
    assert top[0]["progress"] == 50

    dashboard = client.get("/analytics/dashboard").json()
    assert dashboard["metrics"]["total"] == 2
    assert len(dashboard["recentTasks"]) == 2
    assert dashboard["activeProjects"][0]["name"] == "P"


def test_time_entries_and_clients(client):
    task = create_task(client)
    entry = client.post("/time-entries", json={"taskId": task["id"], "duration": 1.25})
    assert entry.status_code == 200
    assert client.get(f"/tasks/{task['id']}").json()["actualTime"] == 1.25
    assert len(client.get("/time-entries", params={"taskId": task["id"]}).json()) == 1
    assert client.get("/time-entries", params={"start": "2024-09-01"}).status_code == 422
    assert client.post("/time-entries", json={"taskId": 99, "duration": 1}).status_code == 404
    assert client.post("/time-entries", json={"taskId": task["id"], "duration": 2e7}).status_code == 400

    created = client.post("/clients", json={"fullName": "Ada", "companyName": "Engines"})
    assert created.status_code == 200
    assert created.json()["clientStatus"] == "Active"
    assert [c["fullName"] for c in client.get("/clients", params={"search": "engine"}).json()] == ["Ada"]


def test_unknown_ids_return_404(client):
    assert client.get("/tasks/999").status_code == 404
    assert client.put("/tasks/999", json={"title": "x"}).status_code == 404
    assert client.get("/projects/999/progress").status_code == 404
    assert client.delete("/clients/999").json()["detail"] == "Client with id 999 not found"


def test_invalid_task_input_is_rejected(client):
    assert client.post("/tasks", json={"title": "   "}).status_code == 422
    assert client.post("/tasks", json={"title": "x", "estimatedTime": -1}).status_code == 422
