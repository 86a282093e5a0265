"""Delivery of persisted notifications to connected users.

Notifications are written in the same transaction as the change that caused
them and stay ``pending`` until they have been handed to the realtime
publisher. Delivery happens right after commit and, for rows left behind, in a
background worker.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import anyio
from sqlalchemy.orm import Session

from cyberhunter.config import get_settings
from cyberhunter.domain.entities import DISPATCH_PENDING, Notification
from cyberhunter.infrastructure.database import SessionLocal
from cyberhunter.infrastructure.repositories import NotificationRepository

from .publisher import realtime_publisher

logger = logging.getLogger(__name__)


def deliver_notifications(
    session: Session, notifications: Iterable[Notification | int]
) -> int:
    """Push pending notifications and record the outcome.

    Must be called after the transaction that created the rows has committed.
    Returns the number of notifications handed to the publisher.
    """

    ids = [item.id if isinstance(item, Notification) else int(item) for item in notifications]
    ids = [notification_id for notification_id in ids if notification_id is not None]
    if not ids:
        return 0

    repository = NotificationRepository(session)
    max_attempts = get_settings().outbox_max_attempts
    delivered: list[int] = []
    for notification in repository.get_many(ids):
        if notification.dispatch_status != DISPATCH_PENDING:
            continue
        try:
            published = realtime_publisher.publish_notification(notification)
        except Exception as exc:  # pragma: no cover - depends on the socket layer
            error = f"{type(exc).__name__}: {exc}"
        else:
            if published:
                delivered.append(notification.id)
                continue
            error = "No event loop available"
        gave_up = repository.record_dispatch_failure(
            notification.id, error=error, max_attempts=max_attempts
        )
        if gave_up:
            logger.error(
                "Giving up on notification %s for user %s: %s",
                notification.id,
                notification.recipient_id,
                error,
            )
        else:
            logger.warning("Could not push notification %s: %s", notification.id, error)

    repository.mark_dispatched(delivered)
    session.commit()
    return len(delivered)


def flush_pending_notifications(*, limit: int = 100) -> int:
    """Deliver a batch of notifications still marked pending."""

    session = SessionLocal()
    try:
        pending = NotificationRepository(session).pending_ids(limit=limit)
        if not pending:
            return 0
        return deliver_notifications(session, pending)
    finally:
        session.close()


async def run_outbox_worker(poll_seconds: float) -> None:
    """Retry pending notifications every ``poll_seconds`` until cancelled."""

    logger.info("Notification outbox worker started (every %.1fs)", poll_seconds)
    while True:
        try:
            delivered = await anyio.to_thread.run_sync(flush_pending_notifications)
        except Exception:
            logger.exception("Notification outbox pass failed")
        else:
            if delivered:
                logger.info("Outbox delivered %s pending notifications", delivered)
        await anyio.sleep(poll_seconds)


__all__ = ["deliver_notifications", "flush_pending_notifications", "run_outbox_worker"]
