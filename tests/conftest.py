"""Shared fixtures.

The environment is pointed at a throwaway data directory before any portal
module is imported, since configuration is read at import time.
"""

import os
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="challenge-portal-tests-"))
os.environ["DATA_DIR"] = str(_TEST_DATA_DIR)
os.environ["UPLOADS_DIR"] = str(_TEST_DATA_DIR / "uploads")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DATA_DIR / 'test.db'}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["FATAL_ERROR_GUARD"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from api.routes.auth import issue_token  # noqa: E402
from app import app  # noqa: E402
from config import UPLOADS_DIR  # noqa: E402
from core.database import SessionLocal, engine  # noqa: E402
from core.permissions import Role  # noqa: E402
from models.base import Base  # noqa: E402
from utils.phase_manager import PhaseManager  # noqa: E402
from utils.task_manager import TaskManager  # noqa: E402
from utils.timestamps import utc_now  # noqa: E402
from utils.upload_storage import UploadStorage  # noqa: E402
from utils.user_manager import UserManager  # noqa: E402

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


@pytest.fixture(autouse=True)
def reset_state():
    """Fresh tables and an empty uploads directory for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    for path in UPLOADS_DIR.iterdir():
        if path.is_file():
            path.unlink()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def storage():
    return UploadStorage(UPLOADS_DIR)


@pytest.fixture
def bearer():
    def headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return headers


@pytest.fixture
def leader_payload():
    def build(**overrides) -> dict:
        payload = {
            "name": "Asha Patil",
            "email": "asha@example.com",
            "phone": "9000000001",
            "password": "secret123",
            "teamName": "Byte Busters",
            "collegeName": "VIT Pune",
            "city": "Pune",
            "year": "TE",
            "branch": "Computer",
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def register_leader(client, leader_payload):
    """Register a leader over HTTP and return the response body."""

    def register(**overrides) -> dict:
        response = client.post("/api/auth/register-leader", json=leader_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return register


@pytest.fixture
def register_member(client):
    def register(team_code: str, index: int = 1, **overrides) -> dict:
        payload = {
            "name": f"Member {index}",
            "email": f"member{index}@example.com",
            "phone": f"90000001{index:02d}",
            "password": "secret123",
            "teamCode": team_code,
            "year": "SE",
            "branch": "IT",
        }
        payload.update(overrides)
        response = client.post("/api/auth/register-member", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return register


@pytest.fixture
def staff_token(db):
    """Create a staff account directly and return a bearer token for it."""

    def create(role: Role = Role.ADMIN, index: int = 1) -> str:
        user = UserManager(db).create_user(
            name=f"{role.value} {index}",
            email=f"{role.value}{index}@example.com",
            phone=f"80000000{index:02d}",
            password="staffpass",
            role=role,
        )
        return issue_token(user)

    return create


@pytest.fixture
def phase(db):
    return PhaseManager(db).create_phase(
        name="Round 1",
        start_date=utc_now() - timedelta(days=1),
        end_date=utc_now() + timedelta(days=30),
    )


@pytest.fixture
def make_task(db, phase):
    def create(days: float = 7, max_marks: int = None, title: str = "Pitch Deck"):
        return TaskManager(db).create_task(
            title=title,
            description="Ten slides on the idea.",
            deadline=utc_now() + timedelta(days=days),
            phase_id=phase.phase_id,
            max_marks=max_marks,
        )

    return create


@pytest.fixture
def pdf_upload():
    def build(content: bytes = PDF_BYTES, name: str = "deck.pdf", content_type: str = "application/pdf"):
        return {"file": (name, content, content_type)}

    return build
