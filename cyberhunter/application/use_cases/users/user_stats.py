"""Use case computing the dashboard figures of the authenticated user."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_IN_PROGRESS,
    User,
)
from cyberhunter.infrastructure.repositories import ProjectRepository, TeamRepository


@dataclass(frozen=True)
class UserStats:
    total_projects: int
    completed_projects: int
    active_projects: int
    total_teams: int
    total_earnings: float


def get_user_stats(session: Session, *, user: User) -> UserStats:
    projects = ProjectRepository(session).list_for_participant(user.id)
    teams = TeamRepository(session).team_ids_for_member(user.id)
    earnings = sum(
        project.budget
        for project in projects
        if project.status == PROJECT_STATUS_COMPLETED and project.has_freelancer(user.id)
    )
    return UserStats(
        total_projects=len(projects),
        completed_projects=sum(
            1 for project in projects if project.status == PROJECT_STATUS_COMPLETED
        ),
        active_projects=sum(
            1 for project in projects if project.status == PROJECT_STATUS_IN_PROGRESS
        ),
        total_teams=len(teams),
        total_earnings=float(earnings),
    )


__all__ = ["UserStats", "get_user_stats"]
