"""Education and work history shown on a user's profile."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass
class Education:
    id: int | None
    user_id: int
    school: str
    degree: str
    field_of_study: str
    start_date: date
    end_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class Experience:
    id: int | None
    user_id: int
    title: str
    company: str
    start_date: date
    location: str | None = None
    end_date: date | None = None
    current: bool = False
    description: str | None = None


__all__ = ["Education", "Experience"]
