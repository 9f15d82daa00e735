"""
Change notifications for projects and themes.

Services call Notifier.notify() after a successful create/update. Delivery is
fire-and-forget: every failure is logged here and never reaches the caller.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

from fastapi import BackgroundTasks

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    entity_type: str  # "project" | "theme"
    entity_name: str
    action: str  # "Added" | "Updated"
    project_name: Optional[str] = None

    @property
    def subject(self) -> str:
        return f"{self.entity_type.capitalize()} {self.action}: {self.entity_name}"


class Notifier:
    """No-op notifier; also the interface the services depend on."""

    def notify(self, event: ChangeEvent) -> None:
        logger.debug("Notification skipped: %s", event.subject)


def render_email(event: ChangeEvent) -> str:
    rows = [f"<p><strong>{escape(event.entity_type.capitalize())} Name:</strong> {escape(event.entity_name)}</p>"]
    if event.entity_type == "theme":
        rows.append(f"<p><strong>Project:</strong> {escape(event.project_name or 'N/A')}</p>")
    rows.append(f"<p><strong>Action:</strong> {escape(event.action)}</p>")
    rows.append(f"<p>A {escape(event.entity_type)} has been {escape(event.action.lower())} in the system.</p>")
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #333;">{escape(event.subject)}</h2>
          <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
            {''.join(rows)}
          </div>
          <p style="color: #666; font-size: 12px;">
            This is an automated notification from the Project Management System.
          </p>
        </div>
    """


class EmailNotifier(Notifier):
    def __init__(self, smtp_factory=smtplib.SMTP):
        self.smtp_factory = smtp_factory

    def notify(self, event: ChangeEvent) -> None:
        if not settings.smtp_configured:
            logger.info("Email not configured. Skipping email notification: %s", event.subject)
            return

        msg = EmailMessage()
        msg["Subject"] = event.subject
        msg["From"] = f'"Project Management System" <{settings.smtp_user}>'
        msg["To"] = settings.notification_email or settings.smtp_user
        msg.set_content(f"{event.subject}\n\nA {event.entity_type} has been {event.action.lower()} in the system.")
        msg.add_alternative(render_email(event), subtype="html")

        try:
            with self.smtp_factory(settings.smtp_host, settings.smtp_port, timeout=10) as smtp:
                if settings.smtp_use_tls:
                    smtp.starttls()
                smtp.login(settings.smtp_user, settings.smtp_password)
                smtp.send_message(msg)
            logger.info("Email sent: %s", event.subject)
        except Exception as e:
            logger.error("Error sending email '%s': %s", event.subject, e)


class BackgroundNotifier(Notifier):
    """Defers delivery until after the response has been sent"""

    def __init__(self, background_tasks: BackgroundTasks, delegate: Notifier):
        self.background_tasks = background_tasks
        self.delegate = delegate

    def notify(self, event: ChangeEvent) -> None:
        self.background_tasks.add_task(notify_safely, self.delegate, event)


def notify_safely(notifier: Notifier, event: ChangeEvent) -> None:
    try:
        notifier.notify(event)
    except Exception as e:
        logger.error("Notifier failed for '%s': %s", event.subject, e)


def get_notifier(background_tasks: BackgroundTasks) -> Notifier:
    return BackgroundNotifier(background_tasks, EmailNotifier())
