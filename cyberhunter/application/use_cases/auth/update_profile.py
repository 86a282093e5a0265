"""Use cases for the authenticated user's own account."""

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.repositories import UserRepository
from cyberhunter.infrastructure.security import get_password_hash, verify_password

from .register_user import ensure_password_strength


def normalize_skills(skills: list[str]) -> list[str]:
    """Strip blanks and drop case-insensitive duplicates, keeping order."""

    seen: set[str] = set()
    normalized: list[str] = []
    for skill in skills:
        cleaned = skill.strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            normalized.append(cleaned)
    return normalized


def update_profile(
    session: Session,
    *,
    user: User,
    name: str | None = None,
    bio: str | None = None,
    skills: list[str] | None = None,
    avatar: str | None = None,
) -> User:
    updated = replace(
        user,
        name=name.strip() if name is not None else user.name,
        bio=bio if bio is not None else user.bio,
        skills=normalize_skills(skills) if skills is not None else user.skills,
        avatar=avatar if avatar is not None else user.avatar,
    )
    if not updated.name:
        raise ValueError("Name cannot be empty")
    saved = UserRepository(session).update(updated)
    session.commit()
    return saved


def change_password(
    session: Session, *, user: User, current_password: str, new_password: str
) -> User:
    """Replace the password; existing tokens stop validating afterwards."""

    if not verify_password(current_password, user.password):
        raise ValueError("Current password is incorrect")
    ensure_password_strength(new_password)
    saved = UserRepository(session).update(
        replace(user, password=get_password_hash(new_password))
    )
    session.commit()
    return saved


__all__ = ["change_password", "normalize_skills", "update_profile"]
