"""Use cases for reading user profiles."""

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Role, User
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.utils import PageRequest


def get_user(session: Session, user_id: int) -> User:
    """Return an existing user or raise :class:`NotFoundError`."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_freelancers(
    session: Session,
    *,
    page: PageRequest,
    skills: list[str] | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    """Return active students matching any of ``skills`` and the search term."""

    return UserRepository(session).search(
        role=Role.STUDENT,
        search=search,
        skills=skills,
        active_only=True,
        offset=page.offset,
        limit=page.limit,
    )


__all__ = ["get_user", "list_freelancers"]
