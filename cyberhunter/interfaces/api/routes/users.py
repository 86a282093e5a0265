"""Endpoints exposing user profiles, profile history and the caller's own figures."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.users import (
    add_education,
    add_experience,
    delete_education,
    delete_experience,
    get_profile,
    get_user_stats,
    list_freelancers,
    update_skills,
)
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_current_active_user, get_page
from cyberhunter.interfaces.api.schemas import (
    EducationCreate,
    EducationRead,
    ExperienceCreate,
    ExperienceRead,
    PublicUserRead,
    SkillsUpdate,
    UserRead,
    UserStatsRead,
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/users", tags=["users"])


def split_csv(value: str | None) -> list[str] | None:
    """Turn ``"a, b"`` into ``["a", "b"]``; ``None`` when nothing is left."""

    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


@router.get("/freelancers")
def browse_freelancers(
    skills: str | None = None,
    search: str | None = None,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    users, total = list_freelancers(db, page=page, skills=split_csv(skills), search=search)
    return page_envelope(
        "users", [PublicUserRead.model_validate(user) for user in users], total, page
    )


@router.get("/stats")
def read_my_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    stats = get_user_stats(db, user=current_user)
    return {"success": True, "stats": UserStatsRead.model_validate(stats)}


@router.put("/skills")
def replace_skills(
    payload: SkillsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    user = update_skills(db, user=current_user, skills=payload.skills)
    return {"success": True, "user": UserRead.model_validate(user)}


@router.post("/education", status_code=status.HTTP_201_CREATED)
def create_education(
    payload: EducationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entries = add_education(db, user=current_user, **payload.model_dump())
    return {"success": True, "education": [EducationRead.model_validate(item) for item in entries]}


@router.delete("/education/{entry_id}")
def remove_education(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entries = delete_education(db, user=current_user, entry_id=entry_id)
    return {"success": True, "education": [EducationRead.model_validate(item) for item in entries]}


@router.post("/experience", status_code=status.HTTP_201_CREATED)
def create_experience(
    payload: ExperienceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entries = add_experience(db, user=current_user, **payload.model_dump())
    return {
        "success": True,
        "experience": [ExperienceRead.model_validate(item) for item in entries],
    }


@router.delete("/experience/{entry_id}")
def remove_experience(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entries = delete_experience(db, user=current_user, entry_id=entry_id)
    return {
        "success": True,
        "experience": [ExperienceRead.model_validate(item) for item in entries],
    }


@router.get("/{user_id}")
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    """Public profile with education and experience, newest entries first."""

    user, education, experience = get_profile(db, user_id)
    return {
        "success": True,
        "user": PublicUserRead.model_validate(user),
        "education": [EducationRead.model_validate(item) for item in education],
        "experience": [ExperienceRead.model_validate(item) for item in experience],
    }
