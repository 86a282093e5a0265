"""SQLAlchemy model for persisted notifications.

The table doubles as the delivery outbox: rows are inserted in the same
transaction as the change that caused them and keep ``dispatch_status`` at
``pending`` until the realtime push has been handed off.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_read", "recipient_id", "is_read"),
        Index("ix_notifications_dispatch", "dispatch_status", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    priority = Column(String(10), nullable=False, default="normal")
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    proposal_id = Column(
        Integer, ForeignKey("proposals.id", ondelete="SET NULL"), nullable=True
    )
    message_id = Column(
        Integer, ForeignKey("chat_messages.id", ondelete="SET NULL"), nullable=True
    )
    actions = Column(JSON, nullable=False, default=list)
    payload = Column(JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    dispatch_status = Column(String(10), nullable=False, default="pending")
    dispatch_attempts = Column(Integer, nullable=False, default=0)
    dispatched_at = Column(DateTime, nullable=True)
    last_dispatch_error = Column(String(500), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime, index=True)


__all__ = ["NotificationModel"]
