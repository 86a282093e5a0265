"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Role, User
from cyberhunter.infrastructure.models import UserModel
from cyberhunter.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class UserRepository:
    """Provide CRUD operations for user entities.

    Methods flush but never commit; the calling use case owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int, *, include_deleted: bool = False) -> User | None:
        model = self._get_model(user_id, include_deleted=include_deleted)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .filter(UserModel.deleted.is_(False))
            .first()
        )
        return self._to_entity(model) if model else None

    def get_by_verification_token(self, token_hash: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.verification_token == token_hash)
            .filter(UserModel.deleted.is_(False))
            .first()
        )
        return self._to_entity(model) if model else None

    def get_by_reset_token(self, token_hash: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.reset_password_token == token_hash)
            .filter(UserModel.deleted.is_(False))
            .first()
        )
        return self._to_entity(model) if model else None

    def search(
        self,
        *,
        role: Role | str | None = None,
        search: str | None = None,
        skills: Sequence[str] | None = None,
        active_only: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[User], int]:
        """Return a page of users matching the filters plus the total count."""

        query = self.session.query(UserModel).filter(UserModel.deleted.is_(False))
        if role:
            query = query.filter(UserModel.role == Role(role).value)
        if active_only:
            query = query.filter(UserModel.is_active.is_(True))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(UserModel.name.ilike(pattern), UserModel.email.ilike(pattern))
            )
        models = query.order_by(UserModel.created_at.desc(), UserModel.id.desc()).all()
        if skills:
            wanted = {skill.strip().lower() for skill in skills if skill.strip()}
            models = [
                model
                for model in models
                if wanted & {str(skill).lower() for skill in model.skills or []}
            ]
        total = len(models)
        window = models[offset : offset + limit] if limit is not None else models[offset:]
        return [self._to_entity(model) for model in window], total

    def list_active_ids(self) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.deleted.is_(False))
            .filter(UserModel.is_active.is_(True))
        )
        return [user_id for (user_id,) in query.all()]

    def get_map_by_ids(self, user_ids: Iterable[int]) -> dict[int, User]:
        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return {}
        query = self.session.query(UserModel).filter(UserModel.id.in_(unique_ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def existing_ids(self, user_ids: Iterable[int]) -> set[int]:
        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return set()
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.id.in_(unique_ids))
            .filter(UserModel.deleted.is_(False))
        )
        return {user_id for (user_id,) in query.all()}

    def count_by_role(self) -> dict[str, int]:
        rows = (
            self.session.query(UserModel.role, func.count(UserModel.id))
            .filter(UserModel.deleted.is_(False))
            .group_by(UserModel.role)
            .all()
        )
        return {role: count for role, count in rows}

    def created_since(self, since: datetime) -> list[datetime]:
        """Return creation timestamps of live accounts registered on or after ``since``."""

        rows = (
            self.session.query(UserModel.created_at)
            .filter(
                UserModel.deleted.is_(False),
                UserModel.created_at >= ensure_app_naive_datetime(since),
            )
            .all()
        )
        return [ensure_app_timezone(created_at) for (created_at,) in rows]

    def recent(self, limit: int = 5) -> list[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.deleted.is_(False))
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def add(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self._get_model(user.id, include_deleted=True)
        if model is None:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.flush()
        return self._to_entity(model)

    def soft_delete(self, user_id: int) -> None:
        model = self._get_model(user_id, include_deleted=True)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        if model.deleted:
            return
        model.deleted = True
        model.deleted_at = now_in_app_naive_datetime()
        model.is_active = False
        self.session.flush()

    def touch_last_active(self, user_id: int) -> None:
        self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(last_active=now_in_app_naive_datetime())
        )

    def increment_counters(
        self, user_ids: Iterable[int], *, points: int = 0, completed_projects: int = 0
    ) -> None:
        """Increase reputation counters in SQL so concurrent awards add up."""

        ids = {int(user_id) for user_id in user_ids}
        if not ids:
            return
        self.session.execute(
            update(UserModel)
            .where(UserModel.id.in_(ids))
            .values(
                points=UserModel.points + points,
                completed_projects=UserModel.completed_projects + completed_projects,
            )
        )

    def _get_model(self, user_id: int | None, *, include_deleted: bool = False) -> UserModel | None:
        if user_id is None:
            return None
        model = self.session.get(UserModel, user_id)
        if model is None or (model.deleted and not include_deleted):
            return None
        return model

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email
        model.password = user.password
        model.role = Role(user.role).value
        model.bio = user.bio
        model.avatar = user.avatar
        model.skills = list(user.skills)
        model.points = user.points
        model.completed_projects = user.completed_projects
        model.is_verified = user.is_verified
        model.is_active = user.is_active
        model.last_active = ensure_app_naive_datetime(user.last_active)
        model.verification_token = user.verification_token
        model.verification_expires_at = ensure_app_naive_datetime(user.verification_expires_at)
        model.reset_password_token = user.reset_password_token
        model.reset_password_expires_at = ensure_app_naive_datetime(
            user.reset_password_expires_at
        )
        model.deleted = user.deleted
        model.deleted_at = ensure_app_naive_datetime(user.deleted_at)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=Role(model.role),
            bio=model.bio,
            avatar=model.avatar,
            skills=list(model.skills or []),
            points=model.points or 0,
            completed_projects=model.completed_projects or 0,
            is_verified=model.is_verified,
            is_active=model.is_active,
            last_active=ensure_app_timezone(model.last_active),
            verification_token=model.verification_token,
            verification_expires_at=ensure_app_timezone(model.verification_expires_at),
            reset_password_token=model.reset_password_token,
            reset_password_expires_at=ensure_app_timezone(model.reset_password_expires_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            deleted=model.deleted,
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["UserRepository"]
