"""Lookup and authorization helpers shared by task use cases."""

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.projects import get_project_or_404
from cyberhunter.domain.entities import Project, Task, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import TaskRepository


def get_task_or_404(session: Session, task_id: int) -> Task:
    task = TaskRepository(session).get(task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def load_task(session: Session, task_id: int) -> tuple[Task, Project]:
    task = get_task_or_404(session, task_id)
    return task, get_project_or_404(session, task.project_id)


def is_project_worker(project: Project, user: User) -> bool:
    return project.is_owned_by(user.id) or project.has_freelancer(user.id)


def ensure_project_worker(project: Project, user: User, *, action: str) -> None:
    if not is_project_worker(project, user):
        raise PermissionDeniedError(f"Not authorized to {action}")


def task_link(task: Task) -> str:
    return f"/projects/{task.project_id}/tasks/{task.id}"


__all__ = [
    "ensure_project_worker",
    "get_task_or_404",
    "is_project_worker",
    "load_task",
    "task_link",
]
