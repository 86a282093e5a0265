"""Use cases for authenticating users and issuing access tokens."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import (
    create_access_token,
    password_signature,
    verify_password,
)


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


def authenticate_user(session: Session, email: str, password: str):
    """Return the authentication result along with the user when possible."""

    repository = UserRepository(session)
    user = repository.get_by_email(email)

    if not user:
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE

    return user, AuthenticationStatus.SUCCESS


def record_login(session: Session, user_id: int) -> None:
    UserRepository(session).touch_last_active(user_id)
    session.commit()


def issue_access_token(user: User) -> str:
    """Sign a token bound to the user's current password and active flag."""

    return create_access_token(
        data={
            "sub": str(user.id),
            "role": user.role.value,
            "pwd_sig": password_signature(user.password, user.is_active),
        }
    )


__all__ = ["AuthenticationStatus", "authenticate_user", "issue_access_token", "record_login"]
