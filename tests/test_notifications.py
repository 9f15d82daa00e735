import pytest

from app.config import settings
from app.main import app
from app.modules.notifications.service import (
    BackgroundNotifier, ChangeEvent, EmailNotifier, Notifier, get_notifier, notify_safely, render_email,
)

EVENT = ChangeEvent("theme", "Core <beta>", "Added", "Apollo")


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.user = user

    def send_message(self, msg):
        FakeSMTP.sent.append(msg)


class BrokenSMTP(FakeSMTP):
    def send_message(self, msg):
        raise OSError("connection reset")


class ExplodingNotifier(Notifier):
    def notify(self, event):
        raise RuntimeError("boom")


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "smtp_user", "bot@example.com")
    monkeypatch.setattr(settings, "smtp_password", "pw")
    monkeypatch.setattr(settings, "notification_email", "team@example.com")
    FakeSMTP.sent = []


def test_subject_and_body():
    assert EVENT.subject == "Theme Added: Core <beta>"
    html = render_email(EVENT)
    assert "Core &lt;beta&gt;" in html
    assert "Apollo" in html


def test_project_email_has_no_project_row():
    html = render_email(ChangeEvent("project", "Apollo", "Updated"))
    assert "Project:" not in html
    assert "has been updated" in html


def test_email_skipped_when_smtp_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "smtp_user", None)
    FakeSMTP.sent = []
    EmailNotifier(smtp_factory=FakeSMTP).notify(EVENT)
    assert FakeSMTP.sent == []


def test_email_sent_when_configured(smtp_settings):
    EmailNotifier(smtp_factory=FakeSMTP).notify(EVENT)
    (msg,) = FakeSMTP.sent
    assert msg["Subject"] == "Theme Added: Core <beta>"
    assert msg["To"] == "team@example.com"


def test_email_failure_is_logged_not_raised(smtp_settings, caplog):
    EmailNotifier(smtp_factory=BrokenSMTP).notify(EVENT)
    assert "connection reset" in caplog.text


def test_notify_safely_swallows_errors(caplog):
    notify_safely(ExplodingNotifier(), EVENT)
    assert "boom" in caplog.text


def test_background_notifier_defers_delivery():
    class Tasks:
        def __init__(self):
            self.tasks = []

        def add_task(self, func, *args):
            self.tasks.append((func, args))

    delegate = ExplodingNotifier()
    tasks = Tasks()
    BackgroundNotifier(tasks, delegate).notify(EVENT)
    assert tasks.tasks == [(notify_safely, (delegate, EVENT))]


def test_default_notifier_wraps_email():
    notifier = get_notifier(background_tasks=None)
    assert isinstance(notifier, BackgroundNotifier)
    assert isinstance(notifier.delegate, EmailNotifier)


def test_failing_notifier_does_not_fail_the_write(client, admin_headers, fake_db):
    app.dependency_overrides[get_notifier] = lambda: ExplodingNotifier()
    res = client.post(
        "/api/projects", data={"name": "Apollo", "description": "d"}, headers=admin_headers,
    )
    assert res.status_code == 201
    assert len(fake_db.rows("projects")) == 1
