"""Use case for provisioning administrator accounts."""

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.auth import ensure_password_strength
from cyberhunter.domain.entities import Role, User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import get_password_hash
from cyberhunter.utils import now_in_app_timezone


def create_admin(session: Session, *, name: str, email: str, password: str) -> User:
    """Create a verified admin; registration never hands out this role."""

    ensure_password_strength(password)
    repository = UserRepository(session)
    normalized_email = email.strip().lower()
    if repository.get_by_email(normalized_email):
        raise ValueError("User already exists")

    user = repository.add(
        User(
            id=None,
            name=name.strip(),
            email=normalized_email,
            password=get_password_hash(password),
            role=Role.ADMIN,
            is_verified=True,
            last_active=now_in_app_timezone(),
        )
    )
    session.commit()
    return user
