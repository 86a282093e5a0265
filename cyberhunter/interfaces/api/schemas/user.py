"""User and authentication schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cyberhunter.domain.entities import Role


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: Literal["student", "client"] = "student"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=50)
    bio: str | None = Field(default=None, max_length=500)
    skills: list[str] | None = None
    avatar: str | None = Field(default=None, max_length=500)


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=8)


class SkillsUpdate(BaseModel):
    skills: list[str]


class AdminUserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=50)
    role: Role | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class PublicUserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: Role
    bio: str | None = None
    avatar: str | None = None
    skills: list[str] = Field(default_factory=list)
    points: int = 0
    completed_projects: int = 0
    created_at: datetime | None = None


class UserRead(PublicUserRead):
    email: EmailStr
    is_verified: bool
    is_active: bool
    last_active: datetime | None = None


class UserStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_projects: int
    completed_projects: int
    active_projects: int
    total_teams: int
    total_earnings: float


class EducationCreate(BaseModel):
    school: str = Field(..., min_length=1, max_length=150)
    degree: str = Field(..., min_length=1, max_length=150)
    field_of_study: str = Field(..., min_length=1, max_length=150)
    start_date: date
    end_date: date | None = None
    current: bool = False
    description: str | None = Field(default=None, max_length=1000)


class EducationRead(EducationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ExperienceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    company: str = Field(..., min_length=1, max_length=150)
    location: str | None = Field(default=None, max_length=150)
    start_date: date
    end_date: date | None = None
    current: bool = False
    description: str | None = Field(default=None, max_length=1000)


class ExperienceRead(ExperienceCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


__all__ = [
    "AdminUserUpdate",
    "EducationCreate",
    "EducationRead",
    "ExperienceCreate",
    "ExperienceRead",
    "ForgotPasswordRequest",
    "LoginRequest",
    "PasswordChangeRequest",
    "ProfileUpdate",
    "PublicUserRead",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SkillsUpdate",
    "Token",
    "UserRead",
    "UserStatsRead",
]
