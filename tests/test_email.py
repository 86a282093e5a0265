"""SendGrid delivery helpers."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from cyberhunter.config import Settings
from cyberhunter.infrastructure import email


class FakeSendGridClient:
    sent: list = []
    status_code = 202
    body = b""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def send(self, message):
        FakeSendGridClient.sent.append((self.api_key, message.get()))
        return SimpleNamespace(status_code=self.status_code, body=self.body)


@pytest.fixture()
def configured(monkeypatch):
    settings = Settings(
        database_url="sqlite://",
        secret_key="k",
        sendgrid_api_key="sg-key",
        sendgrid_sender="noreply@example.com",
        client_url="https://app.example.com/",
    )
    FakeSendGridClient.sent = []
    FakeSendGridClient.status_code = 202
    FakeSendGridClient.body = b""
    monkeypatch.setattr(email, "get_settings", lambda: settings)
    monkeypatch.setattr(email, "SendGridAPIClient", FakeSendGridClient)
    return settings


def test_email_is_skipped_without_configuration(monkeypatch) -> None:
    monkeypatch.setattr(email, "SendGridAPIClient", FakeSendGridClient)
    FakeSendGridClient.sent = []
    assert email.send_email("Subject", "<p>x</p>", "user@example.com") is False
    assert FakeSendGridClient.sent == []


def test_verification_email_links_to_client(configured) -> None:
    assert email.send_verification_email("user@example.com", "Ada <3", "tok123") is True

    api_key, payload = FakeSendGridClient.sent[0]
    assert api_key == "sg-key"
    assert payload["subject"] == "Verify your Cyber Hunter account"
    html = payload["content"][0]["value"]
    assert "https://app.example.com/verify-email/tok123" in html
    assert "Ada &lt;3" in html


def test_rejected_email_is_reported_as_failure(configured, caplog) -> None:
    FakeSendGridClient.status_code = 400
    FakeSendGridClient.body = b'{"errors": [{"message": "bad sender"}]}'

    with caplog.at_level("ERROR"):
        assert email.send_password_reset_email("user@example.com", "Ada", "tok", 30) is False
    assert "bad sender" in caplog.text


def test_sendgrid_settings_must_come_in_pairs() -> None:
    with pytest.raises(ValueError):
        Settings(database_url="sqlite://", secret_key="k", sendgrid_api_key="only-key")
