"""Forward new dashboard notifications to the admin mailbox via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings
from app.domain.entities import NotificationRecord

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Return a readable summary of a SendGrid error payload."""

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not isinstance(body, dict):
        return None

    errors = body.get("errors")
    if isinstance(errors, list):
        messages = [
            str(item["message"])
            for item in errors
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return json.dumps(body)


def _log_sendgrid_failure(status_code: Any, body: Any) -> None:
    details = _describe_sendgrid_body(body)
    if details:
        logger.error("SendGrid request failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid request failed with status %s", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        status_code = getattr(exc, "status_code", None)
        if status_code is None:
            logger.exception("Error sending email via SendGrid: %s", exc)
        else:
            _log_sendgrid_failure(status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False
    return True


def render_notification_email(record: NotificationRecord) -> tuple[str, str]:
    """Return the subject and HTML body describing ``record``."""

    subject = f"[{record.priority.value.upper()}] {record.title}"
    rows = "".join(
        f"<tr><td><strong>{html.escape(str(key))}</strong></td>"
        f"<td>{html.escape(str(value))}</td></tr>"
        for key, value in record.data.items()
        if value not in (None, "")
    )
    body = (
        f"<h2>{html.escape(record.title)}</h2>"
        f"<p>{html.escape(record.message)}</p>"
        f"<p><strong>Type:</strong> {html.escape(record.type.value)}<br>"
        f"<strong>Received:</strong> {record.timestamp.isoformat()}</p>"
    )
    if rows:
        body += f"<table>{rows}</table>"
    return subject, body


def send_admin_notification_email(record: NotificationRecord) -> bool:
    """Email a copy of ``record`` to the configured admin mailbox."""

    recipient = get_settings().admin_notification_email
    if not recipient:
        logger.info("No admin mailbox configured; skipping notification email")
        return False
    subject, body = render_notification_email(record)
    return send_email(subject, body, recipient)


__all__ = [
    "render_notification_email",
    "send_admin_notification_email",
    "send_email",
]
