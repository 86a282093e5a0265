"""Administrative use cases over user accounts."""

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Role, User
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.utils import PageRequest


def list_users(
    session: Session,
    *,
    page: PageRequest,
    role: Role | str | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    return UserRepository(session).search(
        role=role, search=search, offset=page.offset, limit=page.limit
    )


def update_user(
    session: Session,
    *,
    user_id: int,
    name: str | None = None,
    role: Role | str | None = None,
    is_active: bool | None = None,
    is_verified: bool | None = None,
) -> User:
    """Update the account flags an administrator controls."""

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise NotFoundError("User not found")

    updated = replace(
        user,
        name=name.strip() if name else user.name,
        role=Role(role) if role is not None else user.role,
        is_active=is_active if is_active is not None else user.is_active,
        is_verified=is_verified if is_verified is not None else user.is_verified,
    )
    saved = repository.update(updated)
    session.commit()
    return saved


def delete_user(session: Session, *, user_id: int) -> None:
    """Soft delete an account; administrators cannot be deleted."""

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_admin():
        raise ValueError("Cannot delete admin user")
    repository.soft_delete(user_id)
    session.commit()


__all__ = ["delete_user", "list_users", "update_user"]
