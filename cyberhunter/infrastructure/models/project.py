"""SQLAlchemy models for projects and their proposals, milestones and links."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class ProjectModel(Base):
    """A job posted by a client.

    ``version`` is checked on every ORM update so concurrent edits of the
    JSON columns fail instead of overwriting each other.
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=True)
    client_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category = Column(String(50), nullable=False, index=True)
    skills = Column(JSON, nullable=False, default=list)
    budget = Column(Float, nullable=False)
    deadline = Column(DateTime, nullable=True)
    duration = Column(String(30), nullable=True)
    status = Column(String(20), nullable=False, default="open", index=True)
    visibility = Column(String(20), nullable=False, default="public")
    assigned_team_id = Column(
        Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True
    )
    reviews = Column(JSON, nullable=False, default=dict)
    start_date = Column(DateTime, nullable=True)
    completed_date = Column(DateTime, nullable=True)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    freelancer_links = relationship(
        "ProjectFreelancerModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectFreelancerModel.assigned_at",
    )
    proposals = relationship(
        "ProposalModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    milestones = relationship(
        "MilestoneModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MilestoneModel.id",
    )


class ProjectFreelancerModel(Base):
    """A freelancer assigned to a project; one row per pair."""

    __tablename__ = "project_freelancers"

    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    freelancer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    assigned_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class ProjectSaveModel(Base):
    """A project bookmarked by a user."""

    __tablename__ = "project_saves"

    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    saved_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class ProposalModel(Base):
    __tablename__ = "proposals"
    __table_args__ = (
        UniqueConstraint("project_id", "freelancer_id", name="uq_proposal_project_freelancer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    freelancer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    cover_letter = Column(Text, nullable=False)
    bid_amount = Column(Float, nullable=False)
    estimated_duration = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    submitted_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    project = relationship("ProjectModel", back_populates="proposals")


class MilestoneModel(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    amount = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default="not_started")
    completed_at = Column(DateTime, nullable=True)

    project = relationship("ProjectModel", back_populates="milestones")


__all__ = [
    "MilestoneModel",
    "ProjectFreelancerModel",
    "ProjectModel",
    "ProjectSaveModel",
    "ProposalModel",
]
