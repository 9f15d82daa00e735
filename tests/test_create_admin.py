from app.scripts.create_admin import ensure_admin, find_user_by_email
from tests.fake_supabase import FakeSupabase


def test_ensure_admin_creates_then_promotes():
    db = FakeSupabase()

    assert ensure_admin(db, "root@example.com", "first-pass", "Root") == "created"
    user = find_user_by_email(db, "ROOT@example.com")
    assert user.app_metadata["role"] == "admin"
    assert user.user_metadata["name"] == "Root"

    assert ensure_admin(db, "root@example.com", "second-pass", "Root") == "updated"
    assert db.auth.passwords["root@example.com"] == "second-pass"


def test_ensure_admin_promotes_existing_viewer():
    db = FakeSupabase()
    db.auth.add_user("viewer@example.com", name="Viewer")

    assert ensure_admin(db, "viewer@example.com", "pw123456", "ignored") == "updated"
    user = find_user_by_email(db, "viewer@example.com")
    assert user.app_metadata == {"role": "admin"}
    assert user.user_metadata["name"] == "Viewer"


def test_find_user_by_email_reads_every_page():
    db = FakeSupabase()
    for i in range(5):
        db.auth.add_user(f"user{i}@example.com")

    assert find_user_by_email(db, "user4@example.com", per_page=2).email == "user4@example.com"
    assert find_user_by_email(db, "nobody@example.com", per_page=2) is None
    assert ensure_admin(db, "user4@example.com", "pw123456", "User") == "updated"
