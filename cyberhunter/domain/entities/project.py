"""Domain entities for projects and the records hanging off them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

PROJECT_STATUS_DRAFT = "draft"
PROJECT_STATUS_OPEN = "open"
PROJECT_STATUS_IN_PROGRESS = "in_progress"
PROJECT_STATUS_REVIEW = "review"
PROJECT_STATUS_COMPLETED = "completed"
PROJECT_STATUS_CANCELLED = "cancelled"

PROJECT_STATUSES = (
    PROJECT_STATUS_DRAFT,
    PROJECT_STATUS_OPEN,
    PROJECT_STATUS_IN_PROGRESS,
    PROJECT_STATUS_REVIEW,
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_CANCELLED,
)
LOCKED_PROJECT_STATUSES = frozenset(
    {PROJECT_STATUS_IN_PROGRESS, PROJECT_STATUS_COMPLETED, PROJECT_STATUS_CANCELLED}
)

PROJECT_VISIBILITIES = ("public", "private", "invite_only")
PROJECT_CATEGORIES = (
    "web_development",
    "mobile_development",
    "ui_ux_design",
    "data_science",
    "machine_learning",
    "cybersecurity",
    "devops",
    "content_writing",
    "other",
)
PROJECT_DURATIONS = ("less_than_1_week", "1_2_weeks", "2_4_weeks", "1_3_months", "3_6_months")

PROPOSAL_STATUS_PENDING = "pending"
PROPOSAL_STATUS_ACCEPTED = "accepted"
PROPOSAL_STATUS_REJECTED = "rejected"

MILESTONE_STATUSES = ("not_started", "in_progress", "completed")

REVIEW_SIDE_CLIENT = "client"
REVIEW_SIDE_FREELANCER = "freelancer"


@dataclass
class Proposal:
    id: int | None
    project_id: int
    freelancer_id: int
    cover_letter: str
    bid_amount: float
    estimated_duration: str | None = None
    status: str = PROPOSAL_STATUS_PENDING
    submitted_at: datetime | None = None


@dataclass
class Milestone:
    id: int | None
    project_id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    amount: float | None = None
    status: str = "not_started"
    completed_at: datetime | None = None


@dataclass
class Project:
    """A job posted by a client."""

    id: int | None
    title: str
    description: str
    client_id: int
    category: str
    budget: float
    short_description: str | None = None
    skills: list[str] = field(default_factory=list)
    deadline: datetime | None = None
    duration: str | None = None
    status: str = PROJECT_STATUS_OPEN
    visibility: str = "public"
    assigned_team_id: int | None = None
    assigned_freelancer_ids: list[int] = field(default_factory=list)
    reviews: dict[str, dict[str, Any]] = field(default_factory=dict)
    start_date: datetime | None = None
    completed_date: datetime | None = None
    views: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    def is_owned_by(self, user_id: int) -> bool:
        return self.client_id == user_id

    def has_freelancer(self, user_id: int) -> bool:
        return user_id in self.assigned_freelancer_ids


__all__ = [
    "LOCKED_PROJECT_STATUSES",
    "MILESTONE_STATUSES",
    "Milestone",
    "PROJECT_CATEGORIES",
    "PROJECT_DURATIONS",
    "PROJECT_STATUSES",
    "PROJECT_STATUS_CANCELLED",
    "PROJECT_STATUS_COMPLETED",
    "PROJECT_STATUS_DRAFT",
    "PROJECT_STATUS_IN_PROGRESS",
    "PROJECT_STATUS_OPEN",
    "PROJECT_STATUS_REVIEW",
    "PROJECT_VISIBILITIES",
    "PROPOSAL_STATUS_ACCEPTED",
    "PROPOSAL_STATUS_PENDING",
    "PROPOSAL_STATUS_REJECTED",
    "Project",
    "Proposal",
    "REVIEW_SIDE_CLIENT",
    "REVIEW_SIDE_FREELANCER",
]
