"""
Email notifier for reminders.

Renders HTML bodies with Jinja2 templates and sends them through an
``IEmailTransport``. Transport failures are reported as failed
``NotificationResult`` values rather than raised.
"""

from datetime import UTC, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from bizdesk.config import get_logger
from bizdesk.core.entities.client import Client
from bizdesk.core.entities.reminder import Reminder
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import NotifierError
from bizdesk.core.interfaces.notifier import (
    CompletionNotificationResult,
    IEmailTransport,
    INotifier,
    NotificationResult,
)

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

_jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def reminder_subject(reminder: Reminder) -> str:
    return f"Reminder: {reminder.title}"


def completion_subject(reminder: Reminder) -> str:
    return f"Schedule Completed: {reminder.title}"


def default_completion_message(reminder: Reminder) -> str:
    return f'The schedule "{reminder.title}" has been marked as completed.'


class EmailNotifier(INotifier):
    """Delivers reminder and completion notices by email."""

    def __init__(self, transport: IEmailTransport, app_name: str = "Bizdesk"):
        self._transport = transport
        self._app_name = app_name

    def _render(self, template_name: str, **context) -> str:
        template = _jinja_env.get_template(template_name)
        return template.render(
            app_name=self._app_name,
            current_year=datetime.now(UTC).year,
            **context,
        )

    async def _deliver(
        self, to: str | None, subject: str, text: str, html: str
    ) -> NotificationResult:
        if not to:
            return NotificationResult.failure(None, "recipient has no email address")
        try:
            await self._transport.send(to, subject, text, html)
        except NotifierError as e:
            logger.warning("email_delivery_failed", to=to, subject=subject, error=e.message)
            return NotificationResult.failure(to, e.message)
        return NotificationResult.success(to)

    async def notify_user_of_reminder(
        self, user: User, reminder: Reminder
    ) -> NotificationResult:
        message = reminder.user_message
        html = self._render(
            "reminder_user.html",
            name=user.name,
            reminder=reminder,
            message=message,
        )
        return await self._deliver(user.email, reminder_subject(reminder), message, html)

    async def notify_client_of_reminder(
        self, client: Client, reminder: Reminder
    ) -> NotificationResult:
        message = reminder.client_message
        html = self._render(
            "reminder_client.html",
            name=client.name,
            reminder=reminder,
            message=message,
        )
        return await self._deliver(client.email, reminder_subject(reminder), message, html)

    async def notify_completion(
        self,
        reminder: Reminder,
        actor: User | None,
        message: str,
        *,
        to_user: bool,
        to_client: bool,
        client: Client | None = None,
    ) -> CompletionNotificationResult:
        message = message or default_completion_message(reminder)
        subject = completion_subject(reminder)
        result = CompletionNotificationResult()
        business = actor.display_name if actor is not None else ""

        if to_user and actor is not None and actor.email:
            html = self._render(
                "completion.html",
                name=actor.name,
                reminder=reminder,
                message=message,
                business=business,
            )
            result.user = await self._deliver(actor.email, subject, message, html)

        if to_client and client is not None and client.email:
            html = self._render(
                "completion.html",
                name=client.name,
                reminder=reminder,
                message=message,
                business=business,
            )
            result.client = await self._deliver(client.email, subject, message, html)

        return result
