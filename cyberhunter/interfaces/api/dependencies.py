"""FastAPI dependency utilities."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Role, User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import decode_access_token, password_signature
from cyberhunter.utils import PageRequest, resolve_page

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def _unauthorized(detail: str = "Not authorized, invalid token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str | None, db: Session) -> User:
    """Resolve the user a bearer token was issued to.

    The token must still carry the signature of the user's current password hash
    and active flag.
    """

    if not token:
        raise _unauthorized("Not authorized, no token")
    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    signature = payload.get("pwd_sig")
    if not isinstance(subject, str) or not subject.isdigit() or not isinstance(signature, str):
        raise _unauthorized()

    user = UserRepository(db).get(int(subject), include_deleted=True)
    if user is None:
        raise _unauthorized("User not found")
    if user.deleted or not user.is_active:
        raise _unauthorized("User account is deactivated")
    if signature != password_signature(user.password, user.is_active):
        raise _unauthorized()
    return user


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise _unauthorized("User account is deactivated")
    return current_user


def require_roles(*roles: Role) -> Callable[..., User]:
    """Build a dependency that only lets the given roles through."""

    allowed = {Role(role) for role in roles}

    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {current_user.role.value} is not authorized to access this route",
            )
        return current_user

    return dependency


require_admin = require_roles(Role.ADMIN)


def get_page(page: int = 1, limit: int | None = None) -> PageRequest:
    return resolve_page(page, limit)


__all__ = [
    "get_current_active_user",
    "get_current_user",
    "get_page",
    "oauth2_scheme",
    "require_admin",
    "require_roles",
    "resolve_current_user",
]
