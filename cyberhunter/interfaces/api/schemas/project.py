"""Project, proposal and milestone schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=5000)
    short_description: str | None = Field(default=None, max_length=200)
    category: str
    budget: float = Field(..., ge=0)
    skills: list[str] = Field(default_factory=list)
    deadline: datetime | None = None
    duration: str | None = None
    visibility: Literal["public", "private", "invite_only"] = "public"
    status: Literal["draft", "open"] = "open"


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    short_description: str | None = Field(default=None, max_length=200)
    category: str | None = None
    budget: float | None = Field(default=None, ge=0)
    skills: list[str] | None = None
    deadline: datetime | None = None
    duration: str | None = None
    visibility: Literal["public", "private", "invite_only"] | None = None
    status: str | None = None


class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    short_description: str | None = None
    client_id: int
    category: str
    budget: float
    skills: list[str] = Field(default_factory=list)
    deadline: datetime | None = None
    duration: str | None = None
    status: str
    visibility: str
    assigned_team_id: int | None = None
    assigned_freelancer_ids: list[int] = Field(default_factory=list)
    reviews: dict[str, dict[str, Any]] = Field(default_factory=dict)
    start_date: datetime | None = None
    completed_date: datetime | None = None
    views: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProposalCreate(BaseModel):
    cover_letter: str = Field(..., min_length=1, max_length=5000)
    bid_amount: float = Field(..., ge=0)
    estimated_duration: str | None = None


class ProposalStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected"]


class ProposalRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    freelancer_id: int
    cover_letter: str
    bid_amount: float
    estimated_duration: str | None = None
    status: str
    submitted_at: datetime | None = None


class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    due_date: datetime | None = None
    amount: float | None = Field(default=None, ge=0)


class MilestoneUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    due_date: datetime | None = None
    amount: float | None = Field(default=None, ge=0)
    status: Literal["not_started", "in_progress", "completed"] | None = None


class MilestoneRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    amount: float | None = None
    status: str
    completed_at: datetime | None = None


class ProjectDetailRead(ProjectRead):
    milestones: list[MilestoneRead] = Field(default_factory=list)
    proposals: list[ProposalRead] | None = None


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(default=None, max_length=1000)


class ProjectUpdatePost(BaseModel):
    update_type: str = Field(..., min_length=1, max_length=50)
    content: str = Field(..., min_length=1)


__all__ = [
    "MilestoneCreate",
    "MilestoneRead",
    "MilestoneUpdate",
    "ProjectCreate",
    "ProjectDetailRead",
    "ProjectRead",
    "ProjectUpdate",
    "ProjectUpdatePost",
    "ProposalCreate",
    "ProposalRead",
    "ProposalStatusUpdate",
    "ReviewCreate",
]
