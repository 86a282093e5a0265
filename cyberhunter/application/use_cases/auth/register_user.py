"""Use case for self-service registration."""

from datetime import timedelta

from sqlalchemy.orm import Session

from cyberhunter.config import get_settings
from cyberhunter.domain.entities import SELF_REGISTRATION_ROLES, Role, User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import generate_url_token, get_password_hash
from cyberhunter.utils import now_in_app_timezone

MIN_PASSWORD_LENGTH = 8


def ensure_password_strength(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        msg = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        raise ValueError(msg)


def register_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: Role | str = Role.STUDENT,
) -> tuple[User, str]:
    """Create an unverified account.

    Returns the user and the raw verification token to email; only its digest
    is stored.
    """

    try:
        requested_role = Role(role)
    except ValueError as exc:
        raise ValueError("Invalid role") from exc
    if requested_role not in SELF_REGISTRATION_ROLES:
        raise ValueError("Role must be student or client")
    ensure_password_strength(password)

    repository = UserRepository(session)
    normalized_email = email.strip().lower()
    if repository.get_by_email(normalized_email):
        raise ValueError("User already exists")

    raw_token, token_digest = generate_url_token()
    expires_minutes = get_settings().email_verification_expire_minutes
    user = User(
        id=None,
        name=name.strip(),
        email=normalized_email,
        password=get_password_hash(password),
        role=requested_role,
        verification_token=token_digest,
        verification_expires_at=now_in_app_timezone() + timedelta(minutes=expires_minutes),
        last_active=now_in_app_timezone(),
    )
    created = repository.add(user)
    session.commit()
    return created, raw_token


__all__ = ["MIN_PASSWORD_LENGTH", "ensure_password_strength", "register_user"]
