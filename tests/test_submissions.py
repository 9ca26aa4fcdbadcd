from datetime import timedelta

import pytest

from config import MAX_SUBMISSION_SIZE
from core.exceptions import InvalidUploadError, ValidationError
from core.permissions import Role
from models.submission import SubmissionModel
from utils.submission_manager import SubmissionManager
from utils.timestamps import utc_now
from utils.upload_storage import validate_pdf_upload

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


def test_submission_is_stored_and_served(client, register_leader, make_task, pdf_upload, bearer, storage, db):
    task = make_task()
    leader = register_leader()

    response = client.post(
        f"/api/submissions/{task.task_id}", files=pdf_upload(), headers=bearer(leader["token"])
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task submitted successfully"
    submission = body["submission"]
    assert submission["status"] == "pending"
    assert submission["fileName"].startswith("submission-")
    assert submission["fileName"].endswith(".pdf")
    assert storage.list_files() == [submission["fileName"]]
    assert db.query(SubmissionModel).count() == 1

    served = client.get(submission["fileUrl"])
    assert served.status_code == 200
    assert served.content == PDF_BYTES


def test_late_submission_leaves_no_file_and_no_record(client, register_leader, make_task, pdf_upload, bearer, storage, db):
    task = make_task(days=-1)
    leader = register_leader()

    response = client.post(
        f"/api/submissions/{task.task_id}", files=pdf_upload(), headers=bearer(leader["token"])
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Deadline has passed"}
    assert storage.list_files() == []
    assert db.query(SubmissionModel).count() == 0


def test_resubmission_replaces_file_and_resets_status(client, register_leader, make_task, pdf_upload, staff_token, bearer, storage, db):
    task = make_task()
    headers = bearer(register_leader()["token"])
    first = client.post(f"/api/submissions/{task.task_id}", files=pdf_upload(), headers=headers).json()

    graded = client.put(
        f"/api/submissions/{first['submission']['id']}/grade",
        json={"marks": 70, "remarks": "Solid"},
        headers=bearer(staff_token(Role.EVALUATOR)),
    )
    assert graded.json()["submission"]["status"] == "graded"

    second = client.post(
        f"/api/submissions/{task.task_id}",
        files=pdf_upload(content=PDF_BYTES + b"% revised\n", name="deck-v2.pdf"),
        headers=headers,
    ).json()["submission"]

    assert second["id"] == first["submission"]["id"]
    assert second["fileName"] != first["submission"]["fileName"]
    assert second["status"] == "pending"
    assert second["marks"] == 70
    assert second["remarks"] == "Solid"
    assert storage.list_files() == [second["fileName"]]
    assert db.query(SubmissionModel).count() == 1


@pytest.mark.parametrize(
    "upload_kwargs",
    [
        {"content": b"plain text", "name": "notes.txt", "content_type": "text/plain"},
        {"content": b"GIF89a not a pdf", "name": "fake.pdf", "content_type": "application/pdf"},
    ],
)
def test_non_pdf_is_rejected(client, register_leader, make_task, pdf_upload, bearer, storage, upload_kwargs):
    task = make_task()
    response = client.post(
        f"/api/submissions/{task.task_id}",
        files=pdf_upload(**upload_kwargs),
        headers=bearer(register_leader()["token"]),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF files are allowed!"
    assert storage.list_files() == []


def test_missing_file_is_rejected(client, register_leader, make_task, bearer):
    task = make_task()
    response = client.post(
        f"/api/submissions/{task.task_id}", headers=bearer(register_leader()["token"])
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Please upload a PDF file"


def test_oversized_file_is_rejected(client, register_leader, make_task, pdf_upload, bearer, storage):
    task = make_task()
    content = PDF_BYTES + b"0" * MAX_SUBMISSION_SIZE
    response = client.post(
        f"/api/submissions/{task.task_id}",
        files=pdf_upload(content=content),
        headers=bearer(register_leader()["token"]),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "File too large (max 5MB)"
    assert storage.list_files() == []


def test_unknown_task_removes_stored_file(client, register_leader, pdf_upload, bearer, storage):
    response = client.post(
        "/api/submissions/missing", files=pdf_upload(), headers=bearer(register_leader()["token"])
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Task not found"
    assert storage.list_files() == []


def test_unexpected_failure_returns_500_and_cleans_up(client, register_leader, make_task, pdf_upload, bearer, storage, monkeypatch):
    task = make_task()

    def broken_lookup(self, task_id):
        raise RuntimeError("database went away")

    monkeypatch.setattr("utils.submission_manager.TaskManager.get_task", broken_lookup)
    response = client.post(
        f"/api/submissions/{task.task_id}",
        files=pdf_upload(),
        headers=bearer(register_leader()["token"]),
    )
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Server error dealing with submission",
    }
    assert storage.list_files() == []


def test_failed_commit_removes_new_file(db, make_task, storage, monkeypatch):
    task = make_task()

    def failing_commit():
        raise RuntimeError("disk full")

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(RuntimeError):
        SubmissionManager(db, storage).submit(
            "team-1", task.task_id, PDF_BYTES, "deck.pdf", "application/pdf"
        )
    assert storage.list_files() == []


def test_deadline_uses_the_given_clock(db, make_task, storage):
    task = make_task(days=1)
    manager = SubmissionManager(db, storage)
    with pytest.raises(ValidationError) as exc_info:
        manager.submit(
            "team-1",
            task.task_id,
            PDF_BYTES,
            "deck.pdf",
            "application/pdf",
            now=utc_now() + timedelta(days=2),
        )
    assert str(exc_info.value) == "Deadline has passed"
    assert storage.list_files() == []


def test_caller_without_team_cannot_submit(db, make_task, storage):
    task = make_task()
    with pytest.raises(ValidationError) as exc_info:
        SubmissionManager(db, storage).submit(
            None, task.task_id, PDF_BYTES, "deck.pdf", "application/pdf"
        )
    assert str(exc_info.value) == "You are not part of a team"


def test_staff_cannot_submit(client, make_task, pdf_upload, staff_token, bearer):
    task = make_task()
    response = client.post(
        f"/api/submissions/{task.task_id}", files=pdf_upload(), headers=bearer(staff_token())
    )
    assert response.status_code == 403


def test_team_members_share_submissions(client, register_leader, register_member, make_task, pdf_upload, bearer):
    task = make_task()
    leader = register_leader()
    member = register_member(leader["teamCode"])
    member_headers = bearer(member["token"])

    before = client.get(f"/api/submissions/{task.task_id}/me", headers=member_headers)
    assert before.status_code == 404
    assert before.json()["message"] == "No submission found"

    client.post(
        f"/api/submissions/{task.task_id}", files=pdf_upload(), headers=bearer(leader["token"])
    )

    mine = client.get(f"/api/submissions/{task.task_id}/me", headers=member_headers)
    assert mine.status_code == 200
    listing = client.get("/api/submissions", headers=member_headers).json()["submissions"]
    assert [s["id"] for s in listing] == [mine.json()["submission"]["id"]]


def test_validate_pdf_upload_checks_size_limit():
    with pytest.raises(InvalidUploadError):
        validate_pdf_upload(PDF_BYTES, "application/pdf", max_size=8)
    validate_pdf_upload(PDF_BYTES, "application/pdf")
