"""Domain entities for teams, their members and invitations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

TEAM_ROLE_ADMIN = "admin"
TEAM_ROLE_MEMBER = "member"
TEAM_ROLES = (TEAM_ROLE_ADMIN, TEAM_ROLE_MEMBER)

INVITATION_STATUS_PENDING = "pending"
INVITATION_STATUS_ACCEPTED = "accepted"
INVITATION_STATUS_DECLINED = "declined"


@dataclass
class TeamMember:
    user_id: int
    role: str = TEAM_ROLE_MEMBER
    permissions: list[str] = field(default_factory=list)
    joined_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == TEAM_ROLE_ADMIN


@dataclass
class TeamInvitation:
    id: int | None
    team_id: int
    user_id: int
    invited_by: int
    role: str = TEAM_ROLE_MEMBER
    status: str = INVITATION_STATUS_PENDING
    created_at: datetime | None = None
    responded_at: datetime | None = None


@dataclass
class Team:
    """A group of users collaborating on projects."""

    id: int | None
    name: str
    creator_id: int
    description: str | None = None
    skills: list[str] = field(default_factory=list)
    is_active: bool = True
    members: list[TeamMember] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    def member(self, user_id: int) -> TeamMember | None:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def is_member(self, user_id: int) -> bool:
        return self.member(user_id) is not None

    def is_admin(self, user_id: int) -> bool:
        member = self.member(user_id)
        return member is not None and member.is_admin

    @property
    def member_ids(self) -> list[int]:
        return [member.user_id for member in self.members]

    @property
    def admin_ids(self) -> list[int]:
        return [member.user_id for member in self.members if member.is_admin]


__all__ = [
    "INVITATION_STATUS_ACCEPTED",
    "INVITATION_STATUS_DECLINED",
    "INVITATION_STATUS_PENDING",
    "TEAM_ROLES",
    "TEAM_ROLE_ADMIN",
    "TEAM_ROLE_MEMBER",
    "Team",
    "TeamInvitation",
    "TeamMember",
]
