"""Persistence helpers for profile education and experience entries."""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Education, Experience
from cyberhunter.infrastructure.models import EducationModel, ExperienceModel


class ProfileRepository:
    """Entries are rows of their own; adding or removing one never rewrites the others."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_education(self, user_id: int) -> list[Education]:
        query = (
            self.session.query(EducationModel)
            .filter(EducationModel.user_id == user_id)
            .order_by(EducationModel.id.desc())
        )
        return [self._education_to_entity(model) for model in query.all()]

    def add_education(self, entry: Education) -> Education:
        model = EducationModel(
            user_id=entry.user_id,
            school=entry.school,
            degree=entry.degree,
            field_of_study=entry.field_of_study,
            start_date=entry.start_date,
            end_date=entry.end_date,
            current=entry.current,
            description=entry.description,
        )
        self.session.add(model)
        self.session.flush()
        return self._education_to_entity(model)

    def delete_education(self, user_id: int, entry_id: int) -> bool:
        table = EducationModel.__table__
        removed = self.session.execute(
            delete(table).where(table.c.id == entry_id, table.c.user_id == user_id)
        ).rowcount
        return bool(removed)

    def list_experience(self, user_id: int) -> list[Experience]:
        query = (
            self.session.query(ExperienceModel)
            .filter(ExperienceModel.user_id == user_id)
            .order_by(ExperienceModel.id.desc())
        )
        return [self._experience_to_entity(model) for model in query.all()]

    def add_experience(self, entry: Experience) -> Experience:
        model = ExperienceModel(
            user_id=entry.user_id,
            title=entry.title,
            company=entry.company,
            location=entry.location,
            start_date=entry.start_date,
            end_date=entry.end_date,
            current=entry.current,
            description=entry.description,
        )
        self.session.add(model)
        self.session.flush()
        return self._experience_to_entity(model)

    def delete_experience(self, user_id: int, entry_id: int) -> bool:
        table = ExperienceModel.__table__
        removed = self.session.execute(
            delete(table).where(table.c.id == entry_id, table.c.user_id == user_id)
        ).rowcount
        return bool(removed)

    @staticmethod
    def _education_to_entity(model: EducationModel) -> Education:
        return Education(
            id=model.id,
            user_id=model.user_id,
            school=model.school,
            degree=model.degree,
            field_of_study=model.field_of_study,
            start_date=model.start_date,
            end_date=model.end_date,
            current=bool(model.current),
            description=model.description,
        )

    @staticmethod
    def _experience_to_entity(model: ExperienceModel) -> Experience:
        return Experience(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            company=model.company,
            location=model.location,
            start_date=model.start_date,
            end_date=model.end_date,
            current=bool(model.current),
            description=model.description,
        )


__all__ = ["ProfileRepository"]
