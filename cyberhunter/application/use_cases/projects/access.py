"""Lookup and authorization helpers shared by project-related use cases."""

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Project, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import ProjectRepository, TeamRepository


def get_project_or_404(session: Session, project_id: int) -> Project:
    project = ProjectRepository(session).get(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


def ensure_project_owner(project: Project, user: User, *, action: str = "modify") -> None:
    if not project.is_owned_by(user.id):
        raise PermissionDeniedError(f"Not authorized to {action} this project")


def project_participant_ids(session: Session, project: Project) -> list[int]:
    """Client, assigned freelancers and members of the assigned team, in that order."""

    participants = [project.client_id, *project.assigned_freelancer_ids]
    if project.assigned_team_id is not None:
        participants.extend(TeamRepository(session).member_ids(project.assigned_team_id))
    return list(dict.fromkeys(participants))


def is_project_participant(session: Session, project: Project, user_id: int) -> bool:
    if project.is_owned_by(user_id) or project.has_freelancer(user_id):
        return True
    if project.assigned_team_id is None:
        return False
    return user_id in TeamRepository(session).member_ids(project.assigned_team_id)


def ensure_project_participant(session: Session, project: Project, user: User) -> None:
    if not is_project_participant(session, project, user.id):
        raise PermissionDeniedError("You are not a participant of this project")


__all__ = [
    "ensure_project_owner",
    "ensure_project_participant",
    "get_project_or_404",
    "is_project_participant",
    "project_participant_ids",
]
