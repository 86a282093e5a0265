"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import case, or_, select, update
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    DISPATCH_FAILED,
    DISPATCH_PENDING,
    DISPATCH_SENT,
    Notification,
    NotificationAction,
)
from cyberhunter.infrastructure.models import NotificationModel
from cyberhunter.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Rows double as the delivery outbox, so the dispatch bookkeeping lives here
    as well.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def get_many(self, notification_ids: Iterable[int]) -> list[Notification]:
        ids = {int(notification_id) for notification_id in notification_ids}
        if not ids:
            return []
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .order_by(NotificationModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        offset: int = 0,
        limit: int | None = 50,
    ) -> tuple[Sequence[Notification], int]:
        query = self._visible(user_id)
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        total = query.count()
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.offset(offset).limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def unread_count(self, user_id: int) -> int:
        return self._visible(user_id).filter(NotificationModel.is_read.is_(False)).count()

    def add(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def add_many(self, notifications: Iterable[Notification]) -> list[Notification]:
        models = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            self.session.add(model)
            models.append(model)
        self.session.flush()
        return [self._to_entity(model) for model in models]

    def mark_read(self, notification_id: int) -> Notification | None:
        """Set the read flag once; later calls leave ``read_at`` untouched."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            model.read_at = now_in_app_naive_datetime()
            self.session.flush()
        return self._to_entity(model)

    def mark_all_read(self, user_id: int) -> int:
        result = self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.recipient_id == user_id)
            .where(NotificationModel.is_read.is_(False))
            .values(is_read=True, read_at=now_in_app_naive_datetime())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def delete(self, notification_id: int) -> None:
        model = self.session.get(NotificationModel, notification_id)
        if model is not None:
            self.session.delete(model)
            self.session.flush()

    def delete_read(self, user_id: int) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == user_id)
            .filter(NotificationModel.is_read.is_(True))
            .delete(synchronize_session=False)
        )
        return deleted or 0

    def complete_action(self, notification_id: int, index: int) -> Notification:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        actions = [dict(action) for action in model.actions or []]
        if index < 0 or index >= len(actions):
            raise ValueError("Invalid action index")
        actions[index]["completed"] = True
        actions[index]["completed_at"] = now_in_app_naive_datetime().isoformat()
        model.actions = actions
        self.session.flush()
        return self._to_entity(model)

    # -- outbox -----------------------------------------------------------

    def pending_ids(self, *, limit: int = 100) -> list[int]:
        query = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.dispatch_status == DISPATCH_PENDING)
            .order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
            .limit(limit)
        )
        return [notification_id for (notification_id,) in query.all()]

    def mark_dispatched(self, notification_ids: Iterable[int]) -> None:
        ids = list(notification_ids)
        if not ids:
            return
        self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.id.in_(ids))
            .where(NotificationModel.dispatch_status == DISPATCH_PENDING)
            .values(
                dispatch_status=DISPATCH_SENT,
                dispatched_at=now_in_app_naive_datetime(),
                dispatch_attempts=NotificationModel.dispatch_attempts + 1,
            )
            .execution_options(synchronize_session=False)
        )

    def record_dispatch_failure(
        self, notification_id: int, *, error: str, max_attempts: int
    ) -> bool:
        """Count a failed push; returns ``True`` once the row is given up on."""

        attempts = NotificationModel.dispatch_attempts + 1
        changed = self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.dispatch_status == DISPATCH_PENDING,
            )
            .values(
                dispatch_attempts=attempts,
                last_dispatch_error=error[:500],
                dispatch_status=case(
                    (attempts >= max_attempts, DISPATCH_FAILED), else_=DISPATCH_PENDING
                ),
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        if not changed:
            return False
        model = self.session.identity_map.get(
            self.session.identity_key(NotificationModel, notification_id)
        )
        if model is not None:
            self.session.expire(model)
        status = self.session.execute(
            select(NotificationModel.dispatch_status).where(NotificationModel.id == notification_id)
        ).scalar_one()
        return status == DISPATCH_FAILED

    # -- helpers ----------------------------------------------------------

    def _visible(self, user_id: int):
        now = now_in_app_naive_datetime()
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == user_id)
            .filter(
                or_(NotificationModel.expires_at.is_(None), NotificationModel.expires_at > now)
            )
        )

    @staticmethod
    def _action_to_dict(action: NotificationAction) -> dict[str, Any]:
        return {
            "label": action.label,
            "type": action.action_type,
            "value": action.value,
            "method": action.method,
            "completed": action.completed,
            "completed_at": action.completed_at.isoformat() if action.completed_at else None,
        }

    @staticmethod
    def _action_from_dict(data: dict[str, Any]) -> NotificationAction:
        completed_at = data.get("completed_at")
        return NotificationAction(
            label=data.get("label", ""),
            action_type=data.get("type", ""),
            value=data.get("value", ""),
            method=data.get("method", "POST"),
            completed=bool(data.get("completed")),
            completed_at=ensure_app_timezone(datetime.fromisoformat(completed_at))
            if completed_at
            else None,
        )

    @classmethod
    def _apply_entity_to_model(cls, model: NotificationModel, notification: Notification) -> None:
        model.recipient_id = notification.recipient_id
        model.type = notification.type
        model.title = notification.title
        model.content = notification.content
        model.link = notification.link
        model.priority = notification.priority
        model.created_by = notification.created_by
        model.project_id = notification.project_id
        model.team_id = notification.team_id
        model.task_id = notification.task_id
        model.proposal_id = notification.proposal_id
        model.message_id = notification.message_id
        model.actions = [cls._action_to_dict(action) for action in notification.actions]
        model.payload = dict(notification.payload or {})
        model.is_read = notification.is_read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.dispatch_status = notification.dispatch_status
        model.dispatch_attempts = notification.dispatch_attempts
        model.dispatched_at = ensure_app_naive_datetime(notification.dispatched_at)
        if notification.created_at is not None:
            model.created_at = ensure_app_naive_datetime(notification.created_at)

    @classmethod
    def _to_entity(cls, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            type=model.type,
            title=model.title,
            content=model.content,
            link=model.link,
            priority=model.priority,
            created_by=model.created_by,
            project_id=model.project_id,
            team_id=model.team_id,
            task_id=model.task_id,
            proposal_id=model.proposal_id,
            message_id=model.message_id,
            actions=[cls._action_from_dict(action) for action in model.actions or []],
            payload=dict(model.payload or {}),
            is_read=model.is_read,
            read_at=ensure_app_timezone(model.read_at),
            expires_at=ensure_app_timezone(model.expires_at),
            dispatch_status=model.dispatch_status,
            dispatch_attempts=model.dispatch_attempts or 0,
            dispatched_at=ensure_app_timezone(model.dispatched_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
