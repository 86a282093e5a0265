"""Use cases for creating, browsing, editing and removing teams."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import TEAM_ROLE_ADMIN, Team, TeamMember, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import ProjectRepository, TeamRepository
from cyberhunter.utils import PageRequest


def get_team_or_404(session: Session, team_id: int) -> Team:
    team = TeamRepository(session).get(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return team


def ensure_team_admin(team: Team, user: User, *, action: str) -> None:
    if not team.is_admin(user.id):
        raise PermissionDeniedError(f"Not authorized to {action}")


def _clean_skills(skills: list[str] | None) -> list[str]:
    return [skill.strip() for skill in skills or [] if skill.strip()]


def create_team(
    session: Session,
    *,
    actor: User,
    name: str,
    description: str | None = None,
    skills: list[str] | None = None,
) -> Team:
    """Create a team with the actor as its first admin member."""

    if not name.strip():
        raise ValueError("Team name is required")
    team = TeamRepository(session).add(
        Team(
            id=None,
            name=name.strip(),
            creator_id=actor.id,
            description=description,
            skills=_clean_skills(skills),
            members=[TeamMember(user_id=actor.id, role=TEAM_ROLE_ADMIN)],
        )
    )
    session.commit()
    return team


def list_teams(
    session: Session, *, page: PageRequest, search: str | None = None
) -> tuple[list[Team], int]:
    return TeamRepository(session).search(
        search=search, active_only=True, offset=page.offset, limit=page.limit
    )


def list_my_teams(session: Session, *, actor: User) -> list[Team]:
    return TeamRepository(session).list_for_member(actor.id)


def update_team(
    session: Session,
    *,
    actor: User,
    team_id: int,
    name: str | None = None,
    description: str | None = None,
    skills: list[str] | None = None,
    is_active: bool | None = None,
) -> Team:
    team = get_team_or_404(session, team_id)
    ensure_team_admin(team, actor, action="update this team")
    updated = replace(
        team,
        name=name.strip() if name is not None else team.name,
        description=description if description is not None else team.description,
        skills=_clean_skills(skills) if skills is not None else team.skills,
        is_active=is_active if is_active is not None else team.is_active,
    )
    if not updated.name:
        raise ValueError("Team name is required")
    saved = TeamRepository(session).update(updated)
    session.commit()
    return saved


def delete_team(session: Session, *, actor: User, team_id: int) -> None:
    """Delete a team; projects it was assigned to lose the assignment."""

    team = get_team_or_404(session, team_id)
    if team.creator_id != actor.id:
        raise PermissionDeniedError("Not authorized to delete this team")
    ProjectRepository(session).unassign_team(team_id)
    TeamRepository(session).delete(team_id)
    session.commit()


__all__ = [
    "create_team",
    "delete_team",
    "ensure_team_admin",
    "get_team_or_404",
    "list_my_teams",
    "list_teams",
    "update_team",
]
