"""Use cases maintaining the education and experience entries of a profile."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Education, Experience, User
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.repositories import ProfileRepository

from .get_user import get_user


def _required(value: str | None, label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{label} is required")
    return cleaned


def _optional(value: str | None) -> str | None:
    return value.strip() if value and value.strip() else None


def _period(start_date: date, end_date: date | None, current: bool) -> date | None:
    """Validate the period and return the end date to store."""

    if current:
        return None
    if end_date is not None and end_date < start_date:
        raise ValueError("End date cannot be before the start date")
    return end_date


def add_education(
    session: Session,
    *,
    user: User,
    school: str,
    degree: str,
    field_of_study: str,
    start_date: date,
    end_date: date | None = None,
    current: bool = False,
    description: str | None = None,
) -> list[Education]:
    """Add an education entry and return the user's entries, newest first."""

    repository = ProfileRepository(session)
    repository.add_education(
        Education(
            id=None,
            user_id=user.id,
            school=_required(school, "School"),
            degree=_required(degree, "Degree"),
            field_of_study=_required(field_of_study, "Field of study"),
            start_date=start_date,
            end_date=_period(start_date, end_date, current),
            current=current,
            description=_optional(description),
        )
    )
    session.commit()
    return repository.list_education(user.id)


def delete_education(session: Session, *, user: User, entry_id: int) -> list[Education]:
    repository = ProfileRepository(session)
    if not repository.delete_education(user.id, entry_id):
        raise NotFoundError("Education not found")
    session.commit()
    return repository.list_education(user.id)


def add_experience(
    session: Session,
    *,
    user: User,
    title: str,
    company: str,
    start_date: date,
    location: str | None = None,
    end_date: date | None = None,
    current: bool = False,
    description: str | None = None,
) -> list[Experience]:
    """Add a work experience entry and return the user's entries, newest first."""

    repository = ProfileRepository(session)
    repository.add_experience(
        Experience(
            id=None,
            user_id=user.id,
            title=_required(title, "Title"),
            company=_required(company, "Company"),
            location=_optional(location),
            start_date=start_date,
            end_date=_period(start_date, end_date, current),
            current=current,
            description=_optional(description),
        )
    )
    session.commit()
    return repository.list_experience(user.id)


def delete_experience(session: Session, *, user: User, entry_id: int) -> list[Experience]:
    repository = ProfileRepository(session)
    if not repository.delete_experience(user.id, entry_id):
        raise NotFoundError("Experience not found")
    session.commit()
    return repository.list_experience(user.id)


def get_profile(session: Session, user_id: int) -> tuple[User, list[Education], list[Experience]]:
    """Return a user together with their education and experience entries."""

    user = get_user(session, user_id)
    repository = ProfileRepository(session)
    return user, repository.list_education(user.id), repository.list_experience(user.id)


__all__ = [
    "add_education",
    "add_experience",
    "delete_education",
    "delete_experience",
    "get_profile",
]
