"""SQLAlchemy model for the users table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import expression

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of a marketplace account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    bio = Column(Text, nullable=True)
    avatar = Column(String(500), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    points = Column(Integer, nullable=False, default=0, server_default="0")
    completed_projects = Column(Integer, nullable=False, default=0, server_default="0")
    is_verified = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    last_active = Column(DateTime, nullable=True)
    verification_token = Column(String(64), nullable=True, index=True)
    verification_expires_at = Column(DateTime, nullable=True)
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)
    deleted = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    deleted_at = Column(DateTime, nullable=True)


__all__ = ["UserModel"]
