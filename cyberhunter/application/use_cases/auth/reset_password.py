"""Use cases for the forgotten-password flow."""

from dataclasses import replace
from datetime import timedelta

from sqlalchemy.orm import Session

from cyberhunter.config import get_settings
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import (
    generate_url_token,
    get_password_hash,
    hash_url_token,
)
from cyberhunter.utils import now_in_app_timezone

from .register_user import ensure_password_strength


def request_password_reset(session: Session, *, email: str) -> tuple[User, str]:
    """Store a reset token for an active account identified by ``email``.

    Raises ``ValueError`` when no active account matches; callers answer the
    same way in both cases so the endpoint does not reveal registered emails.
    """

    repository = UserRepository(session)
    user = repository.get_by_email(email)
    if user is None or not user.is_active:
        raise ValueError("No active account for this email")

    raw_token, token_digest = generate_url_token()
    expires_minutes = get_settings().password_reset_expire_minutes
    updated = repository.update(
        replace(
            user,
            reset_password_token=token_digest,
            reset_password_expires_at=now_in_app_timezone() + timedelta(minutes=expires_minutes),
        )
    )
    session.commit()
    return updated, raw_token


def reset_password(session: Session, *, token: str, password: str) -> User:
    repository = UserRepository(session)
    user = repository.get_by_reset_token(hash_url_token(token))
    now = now_in_app_timezone()
    if user is None or user.reset_password_expires_at is None:
        raise ValueError("Invalid or expired reset token")
    if user.reset_password_expires_at < now:
        raise ValueError("Invalid or expired reset token")
    ensure_password_strength(password)

    updated = repository.update(
        replace(
            user,
            password=get_password_hash(password),
            reset_password_token=None,
            reset_password_expires_at=None,
        )
    )
    session.commit()
    return updated


__all__ = ["request_password_reset", "reset_password"]
