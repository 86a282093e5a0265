"""SQLAlchemy models for teams, memberships and invitations."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class TeamModel(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    creator_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    skills = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    members = relationship(
        "TeamMemberModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TeamMemberModel.joined_at",
    )


class TeamMemberModel(Base):
    """Membership row; the composite key keeps a user in a team at most once."""

    __tablename__ = "team_members"

    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    role = Column(String(20), nullable=False, default="member")
    permissions = Column(JSON, nullable=False, default=list)
    joined_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class TeamInvitationModel(Base):
    __tablename__ = "team_invitations"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_invitation_user"),)

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invited_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(20), nullable=False, default="member")
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    responded_at = Column(DateTime, nullable=True)


__all__ = ["TeamInvitationModel", "TeamMemberModel", "TeamModel"]
