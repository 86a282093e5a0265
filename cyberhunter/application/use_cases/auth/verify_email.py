"""Use cases for email address verification."""

from dataclasses import replace
from datetime import timedelta

from sqlalchemy.orm import Session

from cyberhunter.config import get_settings
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import generate_url_token, hash_url_token
from cyberhunter.utils import now_in_app_timezone


def verify_email(session: Session, *, token: str) -> User:
    repository = UserRepository(session)
    user = repository.get_by_verification_token(hash_url_token(token))
    if user is None:
        raise ValueError("Invalid or expired verification token")
    if user.verification_expires_at and user.verification_expires_at < now_in_app_timezone():
        raise ValueError("Invalid or expired verification token")

    verified = repository.update(
        replace(
            user,
            is_verified=True,
            verification_token=None,
            verification_expires_at=None,
        )
    )
    session.commit()
    return verified


def resend_verification(session: Session, *, user: User) -> tuple[User, str]:
    """Issue a fresh verification token, replacing the previous one."""

    if user.is_verified:
        raise ValueError("Email is already verified")
    raw_token, token_digest = generate_url_token()
    expires_minutes = get_settings().email_verification_expire_minutes
    updated = UserRepository(session).update(
        replace(
            user,
            verification_token=token_digest,
            verification_expires_at=now_in_app_timezone() + timedelta(minutes=expires_minutes),
        )
    )
    session.commit()
    return updated, raw_token


__all__ = ["resend_verification", "verify_email"]
