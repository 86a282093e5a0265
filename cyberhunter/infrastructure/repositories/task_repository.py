"""Persistence helpers for project tasks."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Task, TimeEntry
from cyberhunter.domain.errors import ConflictError
from cyberhunter.infrastructure.models import TaskAssigneeModel, TaskModel, TaskTimeEntryModel
from cyberhunter.utils import ensure_app_naive_datetime, ensure_app_timezone

from .base import insert_ignoring_duplicates


class TaskRepository:
    """Provide persistence operations for :class:`Task` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: int) -> Task | None:
        model = self.session.get(TaskModel, task_id)
        if model is None:
            return None
        self.session.refresh(model, ["assignee_links"])
        return self._to_entity(model, self._subtask_ids(model.id))

    def list_for_project(
        self,
        project_id: int,
        *,
        status: str | None = None,
        priority: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Task], int]:
        query = self.session.query(TaskModel).filter(TaskModel.project_id == project_id)
        if status:
            query = query.filter(TaskModel.status == status)
        if priority:
            query = query.filter(TaskModel.priority == priority)
        total = query.count()
        query = query.order_by(TaskModel.created_at.asc(), TaskModel.id.asc())
        if limit is not None:
            query = query.offset(offset).limit(limit)
        models = query.all()
        children = self._subtask_map(model.id for model in models)
        return [self._to_entity(model, children.get(model.id, [])) for model in models], total

    def list_ids_for_project(self, project_id: int) -> list[int]:
        rows = self.session.execute(
            select(TaskModel.id).where(TaskModel.project_id == project_id).order_by(TaskModel.id)
        )
        return [task_id for (task_id,) in rows]

    def list_for_assignee(self, user_id: int) -> list[Task]:
        query = (
            self.session.query(TaskModel)
            .join(TaskAssigneeModel, TaskAssigneeModel.task_id == TaskModel.id)
            .filter(TaskAssigneeModel.user_id == user_id)
            .order_by(TaskModel.due_date.is_(None), TaskModel.due_date.asc(), TaskModel.id.asc())
        )
        models = query.all()
        children = self._subtask_map(model.id for model in models)
        return [self._to_entity(model, children.get(model.id, [])) for model in models]

    def count(self) -> int:
        return self.session.query(TaskModel).count()

    def add(self, task: Task) -> Task:
        model = TaskModel(project_id=task.project_id, creator_id=task.creator_id)
        self._apply_entity_to_model(model, task)
        self.session.add(model)
        self.session.flush()
        self.add_assignees(model.id, task.assignee_ids)
        return self.get(model.id)

    def update(self, task: Task) -> Task:
        model = self.session.get(TaskModel, task.id)
        if model is None:
            msg = f"Task with id {task.id} not found"
            raise ValueError(msg)
        if task.version is not None and model.version != task.version:
            raise ConflictError("The task was modified by another request")
        self._apply_entity_to_model(model, task)
        self.session.flush()
        return self.get(model.id)

    def descendant_ids(self, task_id: int) -> list[int]:
        """Return every subtask below ``task_id``, breadth first."""

        found: list[int] = []
        frontier = [task_id]
        while frontier:
            rows = self.session.execute(
                select(TaskModel.id).where(TaskModel.parent_task_id.in_(frontier))
            )
            frontier = [child_id for (child_id,) in rows if child_id not in found]
            found.extend(frontier)
        return found

    def delete_tree(self, task_id: int) -> list[int]:
        """Delete ``task_id`` with all of its subtasks and return the removed ids."""

        removed = [task_id, *self.descendant_ids(task_id)]
        table = TaskModel.__table__
        self.session.execute(delete(table).where(table.c.id.in_(removed)))
        for removed_id in removed:
            model = self.session.identity_map.get(
                self.session.identity_key(TaskModel, removed_id)
            )
            if model is not None:
                self.session.expunge(model)
        return removed

    # -- assignees --------------------------------------------------------

    def add_assignees(self, task_id: int, user_ids: Iterable[int]) -> list[int]:
        """Assign users, returning the ids that were not assigned before."""

        added: list[int] = []
        for user_id in dict.fromkeys(int(user_id) for user_id in user_ids):
            inserted = insert_ignoring_duplicates(
                self.session,
                TaskAssigneeModel.__table__,
                [{"task_id": task_id, "user_id": user_id}],
            )
            if inserted:
                added.append(user_id)
        self._expire_assignees(task_id)
        return added

    def remove_assignee(self, task_id: int, user_id: int) -> bool:
        table = TaskAssigneeModel.__table__
        removed = self.session.execute(
            delete(table).where(table.c.task_id == task_id, table.c.user_id == user_id)
        ).rowcount
        self._expire_assignees(task_id)
        return bool(removed)

    # -- time tracking ----------------------------------------------------

    def list_time_entries(self, task_id: int) -> list[TimeEntry]:
        query = (
            self.session.query(TaskTimeEntryModel)
            .filter(TaskTimeEntryModel.task_id == task_id)
            .order_by(TaskTimeEntryModel.started_at.asc(), TaskTimeEntryModel.id.asc())
        )
        return [self._time_entry_to_entity(model) for model in query.all()]

    def open_time_entry(self, task_id: int, user_id: int) -> TimeEntry | None:
        model = (
            self.session.query(TaskTimeEntryModel)
            .filter(
                TaskTimeEntryModel.task_id == task_id,
                TaskTimeEntryModel.user_id == user_id,
                TaskTimeEntryModel.ended_at.is_(None),
            )
            .one_or_none()
        )
        return self._time_entry_to_entity(model) if model else None

    def start_time_entry(
        self,
        task_id: int,
        user_id: int,
        *,
        started_at: datetime,
        description: str | None = None,
    ) -> TimeEntry:
        model = TaskTimeEntryModel(
            task_id=task_id,
            user_id=user_id,
            started_at=ensure_app_naive_datetime(started_at),
            description=description,
        )
        self.session.add(model)
        self.session.flush()
        return self._time_entry_to_entity(model)

    def close_time_entry(
        self,
        entry_id: int,
        *,
        ended_at: datetime,
        duration_hours: float,
        description: str | None,
    ) -> TimeEntry | None:
        """Close ``entry_id`` unless another request already did; ``None`` then."""

        closed = self.session.execute(
            update(TaskTimeEntryModel)
            .where(TaskTimeEntryModel.id == entry_id, TaskTimeEntryModel.ended_at.is_(None))
            .values(
                ended_at=ensure_app_naive_datetime(ended_at),
                duration_hours=duration_hours,
                description=description,
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        if not closed:
            return None
        model = self.session.get(TaskTimeEntryModel, entry_id, populate_existing=True)
        return self._time_entry_to_entity(model)

    def add_actual_hours(self, task_id: int, hours: float) -> float:
        """Add ``hours`` to the task total in SQL and return the new total."""

        self.session.execute(
            update(TaskModel)
            .where(TaskModel.id == task_id)
            .values(actual_hours=TaskModel.actual_hours + hours)
            .execution_options(synchronize_session=False)
        )
        model = self.session.identity_map.get(self.session.identity_key(TaskModel, task_id))
        if model is not None:
            self.session.expire(model, ["actual_hours"])
        total = self.session.execute(
            select(TaskModel.actual_hours).where(TaskModel.id == task_id)
        ).scalar_one()
        return float(total or 0.0)

    # -- helpers ----------------------------------------------------------

    def _expire_assignees(self, task_id: int) -> None:
        model = self.session.identity_map.get(self.session.identity_key(TaskModel, task_id))
        if model is not None:
            self.session.expire(model, ["assignee_links"])

    def _subtask_ids(self, task_id: int) -> list[int]:
        return self._subtask_map([task_id]).get(task_id, [])

    def _subtask_map(self, task_ids: Iterable[int]) -> dict[int, list[int]]:
        ids = list(task_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(TaskModel.parent_task_id, TaskModel.id)
            .where(TaskModel.parent_task_id.in_(ids))
            .order_by(TaskModel.id)
        )
        children: dict[int, list[int]] = {}
        for parent_id, child_id in rows:
            children.setdefault(parent_id, []).append(child_id)
        return children

    @staticmethod
    def _apply_entity_to_model(model: TaskModel, task: Task) -> None:
        model.title = task.title
        model.description = task.description
        model.milestone_id = task.milestone_id
        model.parent_task_id = task.parent_task_id
        model.status = task.status
        model.priority = task.priority
        model.due_date = ensure_app_naive_datetime(task.due_date)
        model.estimated_hours = task.estimated_hours
        model.tags = list(task.tags)
        model.dependencies = list(task.dependencies)
        model.progress = task.progress
        model.comments = [dict(comment) for comment in task.comments]
        model.completed_at = ensure_app_naive_datetime(task.completed_at)

    @staticmethod
    def _time_entry_to_entity(model: TaskTimeEntryModel) -> TimeEntry:
        return TimeEntry(
            id=model.id,
            task_id=model.task_id,
            user_id=model.user_id,
            started_at=ensure_app_timezone(model.started_at),
            ended_at=ensure_app_timezone(model.ended_at),
            duration_hours=model.duration_hours,
            description=model.description,
        )

    @staticmethod
    def _to_entity(model: TaskModel, subtask_ids: list[int]) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            project_id=model.project_id,
            creator_id=model.creator_id,
            description=model.description,
            milestone_id=model.milestone_id,
            parent_task_id=model.parent_task_id,
            status=model.status,
            priority=model.priority,
            assignee_ids=[link.user_id for link in model.assignee_links],
            due_date=ensure_app_timezone(model.due_date),
            estimated_hours=model.estimated_hours,
            tags=list(model.tags or []),
            dependencies=list(model.dependencies or []),
            progress=model.progress or 0,
            actual_hours=model.actual_hours or 0.0,
            comments=[dict(comment) for comment in model.comments or []],
            subtask_ids=list(subtask_ids),
            completed_at=ensure_app_timezone(model.completed_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            version=model.version,
        )


__all__ = ["TaskRepository"]
