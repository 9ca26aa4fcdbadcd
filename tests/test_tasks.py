import pytest

from core.exceptions import PhaseNotFoundError, TaskNotFoundError
from utils.task_manager import TaskManager
from utils.timestamps import utc_now


def test_participants_see_active_tasks_by_deadline(client, register_leader, make_task, bearer):
    late = make_task(days=10, title="Business Model Canvas")
    expired = make_task(days=-1, title="Problem Statement")
    soon = make_task(days=2, title="Pitch Deck")
    leader = register_leader()

    response = client.get("/api/tasks", headers=bearer(leader["token"]))

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [t["id"] for t in body["tasks"]] == [expired.task_id, soon.task_id, late.task_id]
    assert [t["isExpired"] for t in body["tasks"]] == [True, False, False]
    assert body["tasks"][0]["phase"]["name"] == "Round 1"
    assert body["tasks"][0]["maxMarks"] == 100


def test_inactive_tasks_are_hidden_from_participants(client, register_leader, make_task, staff_token, bearer):
    task = make_task()
    admin = bearer(staff_token())
    response = client.patch(
        f"/api/admin/tasks/{task.task_id}", json={"isActive": False}, headers=admin
    )
    assert response.status_code == 200
    assert response.json()["task"]["isActive"] is False

    leader = register_leader()
    assert client.get("/api/tasks", headers=bearer(leader["token"])).json()["count"] == 0
    assert client.get("/api/admin/tasks", headers=admin).json()["count"] == 1


def test_single_task_lookup(client, register_leader, make_task, bearer):
    task = make_task()
    headers = bearer(register_leader()["token"])

    found = client.get(f"/api/tasks/{task.task_id}", headers=headers)
    assert found.status_code == 200
    assert found.json()["task"]["title"] == "Pitch Deck"

    missing = client.get("/api/tasks/unknown", headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Task not found"}


def test_create_task_route(client, phase, staff_token, bearer):
    headers = bearer(staff_token())
    response = client.post(
        "/api/admin/tasks",
        json={
            "title": "Business Model Canvas",
            "description": "All nine blocks.",
            "deadline": "2030-01-01T00:00:00Z",
            "maxMarks": 150,
            "phaseId": phase.phase_id,
        },
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["task"]["maxMarks"] == 150

    unknown_phase = client.post(
        "/api/admin/tasks",
        json={
            "title": "Orphan",
            "description": "No phase.",
            "deadline": "2030-01-01T00:00:00Z",
            "phaseId": "missing",
        },
        headers=headers,
    )
    assert unknown_phase.status_code == 404
    assert unknown_phase.json()["message"] == "Phase not found"


def test_manager_defaults_and_lookups(db, phase):
    manager = TaskManager(db)
    task = manager.create_task("Video", "Two minutes.", utc_now(), phase.phase_id)
    assert task.max_marks == 100

    updated = manager.update_task(task.task_id, max_marks=50, title="Team Video")
    assert (updated.max_marks, updated.title) == (50, "Team Video")

    with pytest.raises(TaskNotFoundError):
        manager.get_task("missing")
    with pytest.raises(PhaseNotFoundError):
        manager.create_task("X", "Y", utc_now(), "missing")
