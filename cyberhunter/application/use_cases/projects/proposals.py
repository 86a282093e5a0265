"""Use cases for proposals sent by students to open projects."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_notification
from cyberhunter.domain.entities import (
    PROJECT_STATUS_IN_PROGRESS,
    PROJECT_STATUS_OPEN,
    PROPOSAL_STATUS_ACCEPTED,
    PROPOSAL_STATUS_PENDING,
    PROPOSAL_STATUS_REJECTED,
    Project,
    Proposal,
    Role,
    User,
)
from cyberhunter.domain.errors import ConflictError, NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import ProjectRepository
from cyberhunter.utils import now_in_app_timezone

from .access import ensure_project_owner, get_project_or_404

ACCEPTING_PROJECT_STATUSES = (PROJECT_STATUS_OPEN, PROJECT_STATUS_IN_PROGRESS)


def submit_proposal(
    session: Session,
    *,
    actor: User,
    project_id: int,
    cover_letter: str,
    bid_amount: float,
    estimated_duration: str | None = None,
) -> Proposal:
    """Record a student's proposal and notify the client."""

    if not actor.has_role(Role.STUDENT):
        raise PermissionDeniedError("Only students can submit proposals")
    project = get_project_or_404(session, project_id)
    if project.status != PROJECT_STATUS_OPEN:
        raise ValueError("This project is not accepting proposals")
    if bid_amount < 0:
        raise ValueError("Bid amount cannot be negative")

    repository = ProjectRepository(session)
    if repository.find_proposal(project_id, actor.id) is not None:
        raise ValueError("You have already submitted a proposal for this project")

    proposal = repository.add_proposal(
        Proposal(
            id=None,
            project_id=project_id,
            freelancer_id=actor.id,
            cover_letter=cover_letter,
            bid_amount=bid_amount,
            estimated_duration=estimated_duration,
        )
    )
    notification = queue_notification(
        session,
        recipient_id=project.client_id,
        actor_id=actor.id,
        type="proposal",
        title="New Proposal Received",
        content=f"You have received a new proposal for your project: {project.title}",
        link=f"/projects/{project.id}/proposals",
        project_id=project.id,
        proposal_id=proposal.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return proposal


def list_proposals(session: Session, *, actor: User, project_id: int) -> list[Proposal]:
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="view proposals of")
    return ProjectRepository(session).list_proposals(project_id)


def respond_to_proposal(
    session: Session,
    *,
    actor: User,
    project_id: int,
    proposal_id: int,
    status: str,
) -> tuple[Project, Proposal]:
    """Accept or reject a pending proposal.

    Accepting starts the project and assigns the student as a freelancer.
    """

    if status not in (PROPOSAL_STATUS_ACCEPTED, PROPOSAL_STATUS_REJECTED):
        raise ValueError("Status must be accepted or rejected")
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="update proposals of")

    repository = ProjectRepository(session)
    proposal = repository.get_proposal(project_id, proposal_id)
    if proposal is None:
        raise NotFoundError("Proposal not found")
    if proposal.status != PROPOSAL_STATUS_PENDING:
        raise ValueError(f"Proposal has already been {proposal.status}")
    if status == PROPOSAL_STATUS_ACCEPTED and project.status not in ACCEPTING_PROJECT_STATUSES:
        raise ValueError(f"Cannot accept proposals when project status is {project.status}")

    if not repository.set_proposal_status(
        proposal_id, expected=PROPOSAL_STATUS_PENDING, status=status
    ):
        raise ConflictError("The proposal was answered by another request")

    if status == PROPOSAL_STATUS_ACCEPTED:
        repository.add_freelancer(project_id, proposal.freelancer_id)
        if project.status == PROJECT_STATUS_OPEN:
            project = repository.update(
                replace(
                    get_project_or_404(session, project_id),
                    status=PROJECT_STATUS_IN_PROGRESS,
                    start_date=now_in_app_timezone(),
                )
            )
        title = "Proposal Accepted"
        content = f'Your proposal for the project "{project.title}" has been accepted!'
    else:
        title = "Proposal Rejected"
        content = f'Your proposal for the project "{project.title}" has been rejected.'

    notification = queue_notification(
        session,
        recipient_id=proposal.freelancer_id,
        actor_id=actor.id,
        type="proposal",
        title=title,
        content=content,
        link=f"/projects/{project.id}",
        project_id=project.id,
        proposal_id=proposal.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return (
        get_project_or_404(session, project_id),
        repository.get_proposal(project_id, proposal_id),
    )


__all__ = ["list_proposals", "respond_to_proposal", "submit_proposal"]
