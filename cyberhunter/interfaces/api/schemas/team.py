"""Team, membership and invitation schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    skills: list[str] = Field(default_factory=list)


class TeamUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    skills: list[str] | None = None
    is_active: bool | None = None


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    role: str
    permissions: list[str] = Field(default_factory=list)
    joined_at: datetime | None = None


class TeamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    creator_id: int
    skills: list[str] = Field(default_factory=list)
    is_active: bool
    members: list[TeamMemberRead] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InviteRequest(BaseModel):
    user_id: int
    role: Literal["admin", "member"] = "member"


class MemberUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Literal["admin", "member"] | None = None
    permissions: list[str] | None = None


class OwnershipTransfer(BaseModel):
    new_owner_id: int


class InvitationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    user_id: int
    invited_by: int
    role: str
    status: str
    created_at: datetime | None = None
    responded_at: datetime | None = None


__all__ = [
    "InvitationRead",
    "InviteRequest",
    "MemberUpdate",
    "OwnershipTransfer",
    "TeamCreate",
    "TeamMemberRead",
    "TeamRead",
    "TeamUpdate",
]
