"""Endpoints for a user's notification inbox and for sending notifications."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import (
    complete_notification_action,
    count_unread_notifications,
    delete_notification,
    delete_read_notifications,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    send_system_notification,
    send_team_notification,
    send_user_notification,
)
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import (
    get_current_active_user,
    get_page,
    require_admin,
)
from cyberhunter.interfaces.api.schemas import (
    MessageResponse,
    NotificationRead,
    NotificationSend,
    SystemNotificationCreate,
    UserNotificationCreate,
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/")
def read_notifications(
    unread_only: bool = False,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notifications, total = list_notifications(
        db, user=current_user, page=page, unread_only=unread_only
    )
    return page_envelope(
        "notifications",
        [NotificationRead.model_validate(notification) for notification in notifications],
        total,
        page,
    )


@router.get("/unread-count")
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return {"success": True, "count": count_unread_notifications(db, user=current_user)}


@router.put("/read-all")
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    updated = mark_all_notifications_read(db, user=current_user)
    return {"success": True, "message": "All notifications marked as read", "count": updated}


@router.delete("/read")
def clear_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    deleted = delete_read_notifications(db, user=current_user)
    return {"success": True, "message": f"{deleted} read notifications deleted", "count": deleted}


@router.put("/{notification_id}/read")
def read_one(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notification = mark_notification_read(db, user=current_user, notification_id=notification_id)
    return {"success": True, "notification": NotificationRead.model_validate(notification)}


@router.delete("/{notification_id}", response_model=MessageResponse)
def remove_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    delete_notification(db, user=current_user, notification_id=notification_id)
    return MessageResponse(message="Notification deleted")


@router.put("/{notification_id}/actions/{action_index}")
def complete_action(
    notification_id: int,
    action_index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notification = complete_notification_action(
        db, user=current_user, notification_id=notification_id, action_index=action_index
    )
    return {"success": True, "notification": NotificationRead.model_validate(notification)}


@router.post("/system", status_code=status.HTTP_201_CREATED)
def broadcast_system(
    payload: SystemNotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Notify ``recipient_ids``, or every active user when the list is empty."""

    notifications = send_system_notification(db, actor=current_user, **payload.model_dump())
    return {
        "success": True,
        "message": f"System notification sent to {len(notifications)} users",
        "count": len(notifications),
    }


@router.post("/user/{user_id}", status_code=status.HTTP_201_CREATED)
def notify_user(
    user_id: int,
    payload: UserNotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    notification = send_user_notification(
        db, actor=current_user, user_id=user_id, **payload.model_dump()
    )
    return {"success": True, "notification": NotificationRead.model_validate(notification)}


@router.post("/team/{team_id}", status_code=status.HTTP_201_CREATED)
def notify_team(
    team_id: int,
    payload: NotificationSend,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notifications = send_team_notification(
        db, actor=current_user, team_id=team_id, **payload.model_dump()
    )
    return {
        "success": True,
        "message": f"Team notification sent to {len(notifications)} members",
        "count": len(notifications),
    }
