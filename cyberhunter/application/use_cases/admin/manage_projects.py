"""Administrative use cases over projects."""

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Project
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.repositories import ProjectRepository
from cyberhunter.utils import PageRequest


def list_all_projects(
    session: Session,
    *,
    page: PageRequest,
    status: str | None = None,
    search: str | None = None,
) -> tuple[list[Project], int]:
    """List projects in any status or visibility."""

    return ProjectRepository(session).search(
        search=search, status=status, offset=page.offset, limit=page.limit
    )


def remove_project(session: Session, *, project_id: int) -> None:
    repository = ProjectRepository(session)
    if repository.get(project_id) is None:
        raise NotFoundError("Project not found")
    repository.delete(project_id)
    session.commit()


__all__ = ["list_all_projects", "remove_project"]
