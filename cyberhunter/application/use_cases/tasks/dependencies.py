"""Use cases linking tasks that must finish before another can start."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Task, User
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.repositories import TaskRepository

from .access import ensure_project_worker, load_task


def _reaches(repository: TaskRepository, start_id: int, target_id: int) -> bool:
    """Whether ``target_id`` is reachable from ``start_id`` through dependencies."""

    visited: set[int] = set()
    stack = [start_id]
    while stack:
        current = stack.pop()
        if current == target_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        task = repository.get(current)
        if task is not None:
            stack.extend(task.dependencies)
    return False


def add_dependency(session: Session, *, actor: User, task_id: int, dependency_id: int) -> Task:
    task, project = load_task(session, task_id)
    ensure_project_worker(project, actor, action="modify this task")
    repository = TaskRepository(session)
    dependency = repository.get(dependency_id)
    if dependency is None:
        raise NotFoundError("Task or dependency not found")
    if dependency.project_id != task.project_id:
        raise ValueError("Dependency must be from the same project")
    if dependency_id in task.dependencies:
        raise ValueError("Dependency already exists")
    if _reaches(repository, dependency_id, task.id):
        raise ValueError("Adding this dependency would create a circular dependency")

    saved = repository.update(replace(task, dependencies=[*task.dependencies, dependency_id]))
    session.commit()
    return saved


def remove_dependency(
    session: Session, *, actor: User, task_id: int, dependency_id: int
) -> Task:
    task, project = load_task(session, task_id)
    ensure_project_worker(project, actor, action="modify this task")
    if dependency_id not in task.dependencies:
        raise NotFoundError("Dependency not found")

    remaining = [item for item in task.dependencies if item != dependency_id]
    saved = TaskRepository(session).update(replace(task, dependencies=remaining))
    session.commit()
    return saved


__all__ = ["add_dependency", "remove_dependency"]
