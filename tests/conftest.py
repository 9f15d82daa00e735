"""Root conftest: FastAPI test client wired to in-memory collaborators.

Invariants:
    - Every test gets a fresh FakeSupabase (tables + auth)
    - Notifications are recorded, never sent
    - Uploaded images land in a per-test tmp directory
"""

import os
import tempfile

# Must be set before app.config is imported
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="uploads-"))
os.environ.setdefault("ADMIN_SECRET_KEY", "test-admin-key")
os.environ.setdefault("SMTP_USER", "")
os.environ.setdefault("SMTP_PASSWORD", "")

import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase, get_service_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache
from app.modules.notifications.service import Notifier, get_notifier
from app.modules.uploads.storage import LocalImageStorage, get_image_storage
from tests.fake_supabase import FakeSupabase


class RecordingNotifier(Notifier):
    def __init__(self):
        self.events = []

    def notify(self, event):
        self.events.append(event)


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def image_storage(tmp_path):
    return LocalImageStorage(uploads_dir=str(tmp_path), url_prefix="/uploads")


@pytest.fixture
def client(fake_db, notifier, image_storage):
    clear_auth_cache()
    limiter.reset()
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(fake_db):
    token = fake_db.auth.add_user("admin@example.com", role="admin", name="Admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers(fake_db):
    token = fake_db.auth.add_user("viewer@example.com", name="Viewer")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api(client, admin_headers):
    """Small helper for admin-side setup calls that are not under test."""
    class Api:
        def project(self, name="Apollo", description="Moon program", status="ongoing"):
            res = client.post(
                "/api/projects",
                data={"name": name, "description": description, "status": status},
                headers=admin_headers,
            )
            assert res.status_code == 201, res.text
            return res.json()["data"]

        def theme(self, name="Core", description="Core platform", project_id=None):
            data = {"name": name, "description": description}
            if project_id:
                data["project_id"] = project_id
            res = client.post("/api/themes", data=data, headers=admin_headers)
            assert res.status_code == 201, res.text
            return res.json()["data"]

        def member(self, name="Alice", role="Lead", work_detail="Owns the roadmap"):
            res = client.post(
                "/api/team",
                data={"name": name, "role": role, "work_detail": work_detail},
                headers=admin_headers,
            )
            assert res.status_code == 201, res.text
            return res.json()["data"]

        def add_members(self, theme_id, *member_ids):
            return client.put(
                f"/api/themes/{theme_id}/members",
                json={"member_ids": list(member_ids)},
                headers=admin_headers,
            )

        def assign_head(self, theme_id, member_id):
            return client.put(
                f"/api/themes/{theme_id}/theme-head",
                json={"member_id": member_id},
                headers=admin_headers,
            )

    return Api()
