"""Transactional email delivery through SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from cyberhunter.config import get_settings

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Turn a SendGrid error body into a short readable description."""

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
    if isinstance(body, dict):
        messages = [
            str(item["message"])
            for item in body.get("errors") or []
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
        return json.dumps(body)
    return None


def _log_delivery_failure(status_code: Any, body: Any) -> None:
    details = _describe_sendgrid_body(body)
    if details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid API request failed with status %s", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials.

    Returns ``False`` instead of raising when email is not configured or the
    provider rejects the message; callers treat email as a side effect.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email to %s", recipient)
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
            logger.exception("Error sending email via SendGrid")
        else:
            _log_delivery_failure(status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_delivery_failure(status_code, getattr(response, "body", None))
        return False
    return True


def _client_link(path: str) -> str:
    return f"{get_settings().client_url.rstrip('/')}/{path.lstrip('/')}"


def send_verification_email(email: str, name: str, token: str) -> bool:
    """Ask a newly registered user to confirm their address."""

    link = _client_link(f"verify-email/{token}")
    html_content = (
        f"<p>Hi {escape(name)},</p>"
        "<p>Thanks for joining Cyber Hunter. Please confirm your email address:</p>"
        f'<p><a href="{link}">Verify my email</a></p>'
    )
    return send_email("Verify your Cyber Hunter account", html_content, email)


def send_password_reset_email(email: str, name: str, token: str, expires_minutes: int) -> bool:
    """Send the password reset link generated for ``email``."""

    link = _client_link(f"reset-password/{token}")
    html_content = (
        f"<p>Hi {escape(name)},</p>"
        "<p>We received a request to reset your password.</p>"
        f'<p><a href="{link}">Choose a new password</a></p>'
        f"<p>The link expires in {expires_minutes} minutes. "
        "If you did not ask for it you can ignore this email.</p>"
    )
    return send_email("Reset your Cyber Hunter password", html_content, email)


__all__ = ["send_email", "send_password_reset_email", "send_verification_email"]
