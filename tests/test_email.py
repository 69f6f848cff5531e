"""Unit tests for the SendGrid email helper utilities."""

from __future__ import annotations

import json
import sys
import types
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``app`` package) is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.domain.entities import NotificationPriority, NotificationRecord, NotificationType
from app.infrastructure import email as email_module


class RecordingClient:
    """Stand-in SendGrid client that records sent messages."""

    sent: list = []

    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        RecordingClient.sent.append(message)
        return types.SimpleNamespace(status_code=202, body=None)


class ConfiguredSettings:
    sendgrid_api_key = "SG.fake"
    sendgrid_sender = "sender@example.com"
    admin_notification_email = "admin@example.com"


def _record(**overrides) -> NotificationRecord:
    values = dict(
        id="n1",
        type=NotificationType.TAPPER_REQUEST,
        title="New Tapper Request",
        message="Asha has requested tapping services for 500 trees",
        timestamp=datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc),
        priority=NotificationPriority.HIGH,
        data={"farmerName": "Asha <Nair>", "numberOfTrees": 500, "budgetRange": None},
    )
    values.update(overrides)
    return NotificationRecord(**values)


@pytest.fixture(autouse=True)
def _reset_client() -> None:
    RecordingClient.sent = []


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """When SendGrid settings are missing the helper should exit early."""

    class DummySettings:
        sendgrid_api_key = None
        sendgrid_sender = None

    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is False
    assert RecordingClient.sent == []


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """A successful SendGrid response should return ``True``."""

    monkeypatch.setattr(email_module, "get_settings", lambda: ConfiguredSettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is True
    assert len(RecordingClient.sent) == 1


def test_send_email_rejects_non_success_status(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    class RejectingClient(RecordingClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=500, body=b"  upstream down ")

    monkeypatch.setattr(email_module, "get_settings", lambda: ConfiguredSettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", RejectingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result is False
    assert "status 500: upstream down" in caplog.text


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog):
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(RecordingClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "get_settings", lambda: ConfiguredSettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_render_notification_email_escapes_and_skips_empty_values() -> None:
    subject, body = email_module.render_notification_email(_record())

    assert subject == "[HIGH] New Tapper Request"
    assert "Asha &lt;Nair&gt;" in body
    assert "numberOfTrees" in body
    assert "budgetRange" not in body


def test_admin_notification_email_is_sent_to_admin_mailbox(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(email_module, "get_settings", lambda: ConfiguredSettings())
    monkeypatch.setattr(
        email_module,
        "send_email",
        lambda subject, body, recipient: calls.append((subject, recipient)) or True,
    )

    assert email_module.send_admin_notification_email(_record(priority=NotificationPriority.NORMAL))
    assert calls == [("[NORMAL] New Tapper Request", "admin@example.com")]


def test_admin_notification_email_skipped_without_mailbox(monkeypatch: pytest.MonkeyPatch) -> None:
    class NoMailbox(ConfiguredSettings):
        admin_notification_email = None

    monkeypatch.setattr(email_module, "get_settings", lambda: NoMailbox())
    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)

    assert email_module.send_admin_notification_email(_record()) is False
    assert RecordingClient.sent == []
