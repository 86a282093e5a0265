"""Use cases assembling the administrator dashboard and monthly activity."""

from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Project, User
from cyberhunter.infrastructure.repositories import (
    ProjectRepository,
    TaskRepository,
    TeamRepository,
    UserRepository,
)
from cyberhunter.utils import get_app_timezone, now_in_app_timezone

RECENT_LIMIT = 5
SYSTEM_STATS_MONTHS = 12


@dataclass
class DashboardStats:
    users: int
    projects: int
    teams: int
    tasks: int
    users_by_role: dict[str, int] = field(default_factory=dict)
    projects_by_status: dict[str, int] = field(default_factory=dict)
    total_project_value: float = 0.0
    completed_project_value: float = 0.0
    recent_users: list[User] = field(default_factory=list)
    recent_projects: list[Project] = field(default_factory=list)


def get_dashboard_stats(session: Session) -> DashboardStats:
    users = UserRepository(session)
    projects = ProjectRepository(session)
    users_by_role = users.count_by_role()
    total_value, completed_value = projects.budget_totals()
    recent_projects, _ = projects.search(sort="newest", limit=RECENT_LIMIT)
    return DashboardStats(
        users=sum(users_by_role.values()),
        projects=projects.count(),
        teams=TeamRepository(session).count(),
        tasks=TaskRepository(session).count(),
        users_by_role=users_by_role,
        projects_by_status=projects.count_by_status(),
        total_project_value=total_value,
        completed_project_value=completed_value,
        recent_users=users.recent(RECENT_LIMIT),
        recent_projects=recent_projects,
    )


@dataclass
class SystemStats:
    """Per-month series, oldest month first; every list is aligned with ``labels``."""

    labels: list[str]
    users: list[int]
    projects: list[int]
    budgets: list[float]


def _month_keys(today: date, months: int) -> list[tuple[int, int]]:
    index = today.year * 12 + today.month - 1
    return [divmod(value, 12) for value in range(index - months + 1, index + 1)]


def get_system_stats(
    session: Session, *, months: int = SYSTEM_STATS_MONTHS, today: date | None = None
) -> SystemStats:
    """Count registrations and posted projects for each of the last ``months`` months."""

    if months < 1:
        raise ValueError("months must be at least 1")
    today = today or now_in_app_timezone().date()
    keys = [(year, month + 1) for year, month in _month_keys(today, months)]
    first_year, first_month = keys[0]
    since = datetime(first_year, first_month, 1, tzinfo=get_app_timezone())

    positions = {key: index for index, key in enumerate(keys)}
    users = [0] * months
    projects = [0] * months
    budgets = [0.0] * months
    for created_at in UserRepository(session).created_since(since):
        index = positions.get((created_at.year, created_at.month))
        if index is not None:
            users[index] += 1
    for created_at, budget in ProjectRepository(session).created_since(since):
        index = positions.get((created_at.year, created_at.month))
        if index is not None:
            projects[index] += 1
            budgets[index] += budget

    return SystemStats(
        labels=[date(year, month, 1).strftime("%b %Y") for year, month in keys],
        users=users,
        projects=projects,
        budgets=budgets,
    )


__all__ = ["DashboardStats", "SystemStats", "get_dashboard_stats", "get_system_stats"]
