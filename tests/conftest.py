from __future__ import annotations

import sys
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the reeverb package importable when running the suite from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from reeverb.app import create_app  # noqa: E402
from reeverb.core.config import Settings  # noqa: E402
from reeverb.core.security import hash_password  # noqa: E402
from reeverb.db.session import Database  # noqa: E402
from reeverb.repositories.sql_repository import SQLRepository  # noqa: E402


@pytest.fixture()
def settings(tmp_path):
    db_file = tmp_path / "test.db"
    return Settings(
        app_env="test",
        database_url=f"sqlite:///{db_file}",
        jwt_secret="test-secret",
        token_ttl_seconds=3600,
        log_level="WARNING",
    )


@pytest.fixture()
def database(settings):
    """Temporary SQLite schema, dropped and disposed on teardown."""
    db = Database.from_settings(settings)
    db.drop_all()
    db.create_all()

    yield db

    try:
        db.drop_all()
    except Exception:
        pass
    db.dispose()


@pytest.fixture()
def repo(database):
    return SQLRepository(database)


@pytest.fixture()
def make_user(repo):
    def _make(email: str | None = None, password: str = "password123"):
        return repo.create_user(email or f"user-{uuid.uuid4().hex[:8]}@example.com", hash_password(password), name="Test User")

    return _make


@pytest.fixture()
def client(settings, database):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email: str | None = None, password: str = "password123") -> dict:
    res = client.post(
        "/api/v1/auth/register",
        json={"email": email or f"test-{uuid.uuid4()}@example.com", "password": password, "name": "Test User"},
    )
    assert res.status_code == 200, res.text
    return res.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def token(client) -> str:
    return register(client)["token"]


def create_project(client: TestClient, token: str, slug: str | None = None) -> dict:
    res = client.post(
        "/api/v1/projects",
        headers=auth_headers(token),
        json={"name": "Test Project", "slug": slug or f"project-{uuid.uuid4()}"},
    )
    assert res.status_code == 201, res.text
    return res.json()


def create_testimonial(client: TestClient, token: str, project_id: str, **extra) -> dict:
    payload = {"author_name": "Jane Doe", "content": "Great product!", "rating": 5, "author_email": "jane@example.com"}
    payload.update(extra)
    res = client.post(f"/api/v1/projects/{project_id}/testimonials", headers=auth_headers(token), json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def create_tag(client: TestClient, token: str, project_id: str, name: str, color: str | None = None) -> dict:
    res = client.post(
        f"/api/v1/projects/{project_id}/tags",
        headers=auth_headers(token),
        json={"name": name, "color": color},
    )
    assert res.status_code == 201, res.text
    return res.json()
