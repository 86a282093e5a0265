"""SQLAlchemy models for tasks, their assignees and tracked time."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    milestone_id = Column(
        Integer, ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True
    )
    parent_task_id = Column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True
    )
    creator_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default="not_started", index=True)
    priority = Column(String(10), nullable=False, default="medium")
    due_date = Column(DateTime, nullable=True)
    estimated_hours = Column(Float, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    dependencies = Column(JSON, nullable=False, default=list)
    progress = Column(Integer, nullable=False, default=0)
    actual_hours = Column(Float, nullable=False, default=0.0)
    comments = Column(JSON, nullable=False, default=list)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    assignee_links = relationship(
        "TaskAssigneeModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskAssigneeModel.assigned_at",
    )


class TaskAssigneeModel(Base):
    __tablename__ = "task_assignees"

    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    assigned_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class TaskTimeEntryModel(Base):
    __tablename__ = "task_time_entries"
    # At most one open session per user and task.
    __table_args__ = (
        Index(
            "uq_task_time_entries_open",
            "task_id",
            "user_id",
            unique=True,
            sqlite_where=text("ended_at IS NULL"),
            postgresql_where=text("ended_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    started_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    ended_at = Column(DateTime, nullable=True)
    duration_hours = Column(Float, nullable=True)
    description = Column(Text, nullable=True)


__all__ = ["TaskAssigneeModel", "TaskModel", "TaskTimeEntryModel"]
