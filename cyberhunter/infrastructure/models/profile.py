"""SQLAlchemy models for profile education and experience entries."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import expression

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime


class EducationModel(Base):
    __tablename__ = "user_education"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    school = Column(String(150), nullable=False)
    degree = Column(String(150), nullable=False)
    field_of_study = Column(String(150), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class ExperienceModel(Base):
    __tablename__ = "user_experience"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(150), nullable=False)
    company = Column(String(150), nullable=False)
    location = Column(String(150), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["EducationModel", "ExperienceModel"]
