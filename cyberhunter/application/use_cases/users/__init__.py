"""Use cases for browsing and maintaining user profiles."""

from .get_user import get_user, list_freelancers
from .profile_entries import (
    add_education,
    add_experience,
    delete_education,
    delete_experience,
    get_profile,
)
from .update_skills import update_skills
from .user_stats import UserStats, get_user_stats

__all__ = [
    "UserStats",
    "add_education",
    "add_experience",
    "delete_education",
    "delete_experience",
    "get_profile",
    "get_user",
    "get_user_stats",
    "list_freelancers",
    "update_skills",
]
