"""Use cases for creating, browsing, editing and removing projects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    LOCKED_PROJECT_STATUSES,
    PROJECT_CATEGORIES,
    PROJECT_DURATIONS,
    PROJECT_STATUS_DRAFT,
    PROJECT_STATUS_IN_PROGRESS,
    PROJECT_STATUS_OPEN,
    PROJECT_STATUSES,
    PROJECT_VISIBILITIES,
    Milestone,
    Project,
    Proposal,
    Role,
    User,
)
from cyberhunter.domain.errors import PermissionDeniedError
from cyberhunter.infrastructure.repositories import ProjectRepository
from cyberhunter.utils import PageRequest

from .access import ensure_project_owner, get_project_or_404

CREATABLE_STATUSES = (PROJECT_STATUS_DRAFT, PROJECT_STATUS_OPEN)


@dataclass
class ProjectDetail:
    project: Project
    milestones: list[Milestone]
    proposals: list[Proposal] | None = None


def _validate_fields(
    *,
    category: str,
    budget: float,
    duration: str | None,
    visibility: str,
) -> None:
    if category not in PROJECT_CATEGORIES:
        raise ValueError(f"Invalid category: {category}")
    if budget < 0:
        raise ValueError("Budget cannot be negative")
    if duration is not None and duration not in PROJECT_DURATIONS:
        raise ValueError(f"Invalid duration: {duration}")
    if visibility not in PROJECT_VISIBILITIES:
        raise ValueError(f"Invalid visibility: {visibility}")


def create_project(
    session: Session,
    *,
    actor: User,
    title: str,
    description: str,
    category: str,
    budget: float,
    short_description: str | None = None,
    skills: list[str] | None = None,
    deadline: datetime | None = None,
    duration: str | None = None,
    visibility: str = "public",
    status: str = PROJECT_STATUS_OPEN,
) -> Project:
    """Post a new project on behalf of a client."""

    if not actor.has_role(Role.CLIENT):
        raise PermissionDeniedError("Only clients can create projects")
    if status not in CREATABLE_STATUSES:
        raise ValueError("New projects must be draft or open")
    _validate_fields(category=category, budget=budget, duration=duration, visibility=visibility)

    project = Project(
        id=None,
        title=title.strip(),
        description=description,
        client_id=actor.id,
        category=category,
        budget=budget,
        short_description=short_description,
        skills=[skill.strip() for skill in skills or [] if skill.strip()],
        deadline=deadline,
        duration=duration,
        status=status,
        visibility=visibility,
    )
    created = ProjectRepository(session).add(project)
    session.commit()
    return created


def list_projects(
    session: Session,
    *,
    page: PageRequest,
    search: str | None = None,
    category: str | None = None,
    skills: list[str] | None = None,
    min_budget: float | None = None,
    max_budget: float | None = None,
    status: str | None = PROJECT_STATUS_OPEN,
    sort: str = "newest",
) -> tuple[list[Project], int]:
    """Browse public projects, open ones by default."""

    if status is not None and status not in PROJECT_STATUSES:
        raise ValueError(f"Invalid status: {status}")
    return ProjectRepository(session).search(
        search=search,
        category=category,
        skills=skills,
        min_budget=min_budget,
        max_budget=max_budget,
        status=status,
        visibility="public",
        sort=sort,
        offset=page.offset,
        limit=page.limit,
    )


def get_project(session: Session, *, project_id: int, viewer: User) -> ProjectDetail:
    """Return the project with its milestones and, for its client or an admin, proposals.

    Each call counts as one view.
    """

    repository = ProjectRepository(session)
    get_project_or_404(session, project_id)
    repository.increment_views(project_id)
    session.commit()
    project = get_project_or_404(session, project_id)
    proposals = None
    if project.is_owned_by(viewer.id) or viewer.is_admin():
        proposals = repository.list_proposals(project_id)
    return ProjectDetail(
        project=project,
        milestones=repository.list_milestones(project_id),
        proposals=proposals,
    )


def update_project(
    session: Session,
    *,
    actor: User,
    project_id: int,
    title: str | None = None,
    description: str | None = None,
    short_description: str | None = None,
    category: str | None = None,
    skills: list[str] | None = None,
    budget: float | None = None,
    deadline: datetime | None = None,
    duration: str | None = None,
    visibility: str | None = None,
    status: str | None = None,
) -> Project:
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="update")
    if project.status in LOCKED_PROJECT_STATUSES:
        raise ValueError(f"Project cannot be updated when status is {project.status}")
    if status is not None and status not in CREATABLE_STATUSES + ("cancelled",):
        raise ValueError(f"Invalid status change: {status}")

    updated = replace(
        project,
        title=title.strip() if title is not None else project.title,
        description=description if description is not None else project.description,
        short_description=(
            short_description if short_description is not None else project.short_description
        ),
        category=category if category is not None else project.category,
        skills=[skill.strip() for skill in skills if skill.strip()]
        if skills is not None
        else project.skills,
        budget=budget if budget is not None else project.budget,
        deadline=deadline if deadline is not None else project.deadline,
        duration=duration if duration is not None else project.duration,
        visibility=visibility if visibility is not None else project.visibility,
        status=status if status is not None else project.status,
    )
    _validate_fields(
        category=updated.category,
        budget=updated.budget,
        duration=updated.duration,
        visibility=updated.visibility,
    )
    saved = ProjectRepository(session).update(updated)
    session.commit()
    return saved


def delete_project(session: Session, *, actor: User, project_id: int) -> None:
    """Remove a project with its proposals, milestones, tasks and chat."""

    project = get_project_or_404(session, project_id)
    if not project.is_owned_by(actor.id) and not actor.is_admin():
        raise PermissionDeniedError("Not authorized to delete this project")
    if project.status == PROJECT_STATUS_IN_PROGRESS:
        raise ValueError("Cannot delete a project that is in progress")
    ProjectRepository(session).delete(project_id)
    session.commit()


__all__ = [
    "ProjectDetail",
    "create_project",
    "delete_project",
    "get_project",
    "list_projects",
    "update_project",
]
