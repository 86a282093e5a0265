"""Use case replacing the skill list of the authenticated user."""

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.auth import normalize_skills
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.repositories import UserRepository


def update_skills(session: Session, *, user: User, skills: list[str]) -> User:
    normalized = normalize_skills(skills)
    if not normalized:
        raise ValueError("At least one skill is required")
    saved = UserRepository(session).update(replace(user, skills=normalized))
    session.commit()
    return saved


__all__ = ["update_skills"]
