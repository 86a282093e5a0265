"""Use cases for team invitations and membership changes."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out, queue_notification
from cyberhunter.domain.entities import (
    INVITATION_STATUS_ACCEPTED,
    INVITATION_STATUS_DECLINED,
    INVITATION_STATUS_PENDING,
    TEAM_ROLE_ADMIN,
    TEAM_ROLES,
    NotificationAction,
    Team,
    TeamInvitation,
    User,
)
from cyberhunter.domain.errors import ConflictError, NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import TeamRepository, UserRepository

from .manage_teams import ensure_team_admin, get_team_or_404


def _ensure_role(role: str) -> None:
    if role not in TEAM_ROLES:
        raise ValueError(f"Invalid team role: {role}")


def invite_member(
    session: Session,
    *,
    actor: User,
    team_id: int,
    user_id: int,
    role: str = "member",
) -> TeamInvitation:
    """Invite a user; the notification carries accept and decline actions."""

    _ensure_role(role)
    team = get_team_or_404(session, team_id)
    ensure_team_admin(team, actor, action="invite users to this team")
    invitee = UserRepository(session).get(user_id)
    if invitee is None:
        raise NotFoundError("User not found")
    if team.is_member(user_id):
        raise ValueError("User is already a member of this team")

    repository = TeamRepository(session)
    existing = repository.get_invitation(team_id, user_id)
    if existing is not None and existing.status == INVITATION_STATUS_PENDING:
        raise ValueError("User is already invited to this team")

    invitation = repository.save_invitation(
        TeamInvitation(
            id=None,
            team_id=team_id,
            user_id=user_id,
            invited_by=actor.id,
            role=role,
        )
    )
    base = f"/api/teams/{team.id}/invitations"
    notification = queue_notification(
        session,
        recipient_id=user_id,
        actor_id=actor.id,
        type="team",
        title="Team Invitation",
        content=f"You have been invited to join the team: {team.name}",
        link=f"/teams/{team.id}/invitations",
        actions=[
            NotificationAction(label="Accept", action_type="accept", value=f"{base}/accept"),
            NotificationAction(label="Decline", action_type="decline", value=f"{base}/decline"),
        ],
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return invitation


def _answer_invitation(
    session: Session, *, actor: User, team_id: int, status: str
) -> Team:
    team = get_team_or_404(session, team_id)
    repository = TeamRepository(session)
    invitation = repository.get_invitation(team_id, actor.id)
    if invitation is None or invitation.status != INVITATION_STATUS_PENDING:
        raise ValueError("No invitation found for this user")
    if not repository.respond_to_invitation(team_id, actor.id, status=status):
        raise ConflictError("The invitation was answered by another request")

    if status == INVITATION_STATUS_ACCEPTED:
        repository.add_member(team_id, actor.id, role=invitation.role)
        title = "Invitation Accepted"
        content = f"{actor.name} has accepted the invitation to join the team: {team.name}"
    else:
        title = "Invitation Declined"
        content = f"{actor.name} has declined the invitation to join the team: {team.name}"

    notifications = queue_fan_out(
        session,
        recipient_ids=team.admin_ids,
        actor_id=actor.id,
        type="team",
        title=title,
        content=content,
        link=f"/teams/{team.id}",
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return get_team_or_404(session, team_id)


def accept_invitation(session: Session, *, actor: User, team_id: int) -> Team:
    return _answer_invitation(
        session, actor=actor, team_id=team_id, status=INVITATION_STATUS_ACCEPTED
    )


def decline_invitation(session: Session, *, actor: User, team_id: int) -> Team:
    return _answer_invitation(
        session, actor=actor, team_id=team_id, status=INVITATION_STATUS_DECLINED
    )


def list_my_invitations(session: Session, *, actor: User) -> list[TeamInvitation]:
    return TeamRepository(session).list_pending_for_user(actor.id)


def remove_member(session: Session, *, actor: User, team_id: int, user_id: int) -> Team:
    team = get_team_or_404(session, team_id)
    ensure_team_admin(team, actor, action="remove members from this team")
    if not team.is_member(user_id):
        raise NotFoundError("Member not found in this team")
    if user_id == team.creator_id:
        raise ValueError("Cannot remove the team creator")

    TeamRepository(session).remove_member(team_id, user_id)
    notification = queue_notification(
        session,
        recipient_id=user_id,
        actor_id=actor.id,
        type="team",
        title="Removed from Team",
        content=f"You have been removed from the team: {team.name}",
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return get_team_or_404(session, team_id)


def update_member(
    session: Session,
    *,
    actor: User,
    team_id: int,
    user_id: int,
    role: str | None = None,
    permissions: list[str] | None = None,
) -> Team:
    team = get_team_or_404(session, team_id)
    ensure_team_admin(team, actor, action="update members in this team")
    member = team.member(user_id)
    if member is None:
        raise NotFoundError("Member not found in this team")
    if role is not None:
        _ensure_role(role)
        if user_id == team.creator_id and role != TEAM_ROLE_ADMIN:
            raise ValueError("Cannot change the role of the team creator")

    TeamRepository(session).update_member(team_id, user_id, role=role, permissions=permissions)
    notification = queue_notification(
        session,
        recipient_id=user_id,
        actor_id=actor.id,
        type="team",
        title="Role Updated",
        content=f"Your role in the team {team.name} has been updated to {role or member.role}",
        link=f"/teams/{team.id}",
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return get_team_or_404(session, team_id)


def leave_team(session: Session, *, actor: User, team_id: int) -> None:
    team = get_team_or_404(session, team_id)
    if not team.is_member(actor.id):
        raise ValueError("You are not a member of this team")
    if team.creator_id == actor.id:
        raise ValueError(
            "Team creator cannot leave. Transfer ownership or delete the team instead."
        )

    TeamRepository(session).remove_member(team_id, actor.id)
    notifications = queue_fan_out(
        session,
        recipient_ids=team.admin_ids,
        actor_id=actor.id,
        type="team",
        title="Member Left Team",
        content=f"{actor.name} has left the team: {team.name}",
        link=f"/teams/{team.id}",
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, notifications)


def transfer_ownership(
    session: Session, *, actor: User, team_id: int, new_owner_id: int
) -> Team:
    """Hand the team to another member, who is promoted to admin."""

    team = get_team_or_404(session, team_id)
    if team.creator_id != actor.id:
        raise PermissionDeniedError("Not authorized to transfer ownership of this team")
    if not team.is_member(new_owner_id):
        raise NotFoundError("New owner must be a member of the team")

    repository = TeamRepository(session)
    repository.update_member(team_id, new_owner_id, role=TEAM_ROLE_ADMIN)
    repository.update(replace(team, creator_id=new_owner_id))
    notification = queue_notification(
        session,
        recipient_id=new_owner_id,
        actor_id=actor.id,
        type="team",
        title="Team Ownership Transferred",
        content=f"You are now the owner of the team: {team.name}",
        link=f"/teams/{team.id}",
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return get_team_or_404(session, team_id)


__all__ = [
    "accept_invitation",
    "decline_invitation",
    "invite_member",
    "leave_team",
    "list_my_invitations",
    "remove_member",
    "transfer_ownership",
    "update_member",
]
