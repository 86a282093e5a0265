"""Endpoints for project tasks, assignments, comments, dependencies and tracked time."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.tasks import (
    add_comment,
    add_dependency,
    assign_user,
    create_subtask,
    create_task,
    delete_comment,
    delete_task,
    get_task,
    list_my_tasks,
    list_project_tasks,
    list_time_entries,
    remove_dependency,
    start_time_tracking,
    stop_time_tracking,
    unassign_user,
    update_progress,
    update_task,
)
from cyberhunter.domain.entities import Task, User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_current_active_user, get_page
from cyberhunter.interfaces.api.schemas import (
    AssignRequest,
    CommentCreate,
    DependencyCreate,
    MessageResponse,
    ProgressUpdate,
    SubtaskCreate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
    TimeEntryRead,
    TimeTrackingRequest,
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _task_response(task: Task) -> dict:
    return {"success": True, "task": TaskRead.model_validate(task)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def open_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _task_response(create_task(db, actor=current_user, **payload.model_dump()))


@router.get("/mine")
def read_my_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    tasks = list_my_tasks(db, actor=current_user)
    return {
        "success": True,
        "count": len(tasks),
        "tasks": [TaskRead.model_validate(task) for task in tasks],
    }


@router.get("/project/{project_id}")
def read_project_tasks(
    project_id: int,
    task_status: str | None = Query(default=None, alias="status"),
    priority: str | None = None,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    tasks, total = list_project_tasks(
        db,
        actor=current_user,
        project_id=project_id,
        page=page,
        status=task_status,
        priority=priority,
    )
    return page_envelope("tasks", [TaskRead.model_validate(task) for task in tasks], total, page)


@router.get("/{task_id}")
def read_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _task_response(get_task(db, actor=current_user, task_id=task_id))


@router.put("/{task_id}")
def edit_task(
    task_id: int,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    task = update_task(
        db, actor=current_user, task_id=task_id, **payload.model_dump(exclude_unset=True)
    )
    return _task_response(task)


@router.delete("/{task_id}")
def remove_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    removed = delete_task(db, actor=current_user, task_id=task_id)
    return {
        "success": True,
        "message": "Task deleted successfully",
        "deleted_ids": removed,
    }


@router.post("/{task_id}/subtasks", status_code=status.HTTP_201_CREATED)
def open_subtask(
    task_id: int,
    payload: SubtaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    task = create_subtask(db, actor=current_user, task_id=task_id, **payload.model_dump())
    return _task_response(task)


@router.post("/{task_id}/assign")
def assign(
    task_id: int,
    payload: AssignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _task_response(
        assign_user(db, actor=current_user, task_id=task_id, user_id=payload.user_id)
    )


@router.delete("/{task_id}/assign/{user_id}")
def unassign(
    task_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _task_response(
        unassign_user(db, actor=current_user, task_id=task_id, user_id=user_id)
    )


@router.post("/{task_id}/comments", status_code=status.HTTP_201_CREATED)
def comment(
    task_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    created = add_comment(db, actor=current_user, task_id=task_id, content=payload.content)
    return {"success": True, "comment": created}


@router.delete("/{task_id}/comments/{comment_id}", response_model=MessageResponse)
def remove_comment(
    task_id: int,
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    delete_comment(db, actor=current_user, task_id=task_id, comment_id=comment_id)
    return MessageResponse(message="Comment deleted successfully")


@router.put("/{task_id}/progress")
def set_progress(
    task_id: int,
    payload: ProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _task_response(
        update_progress(db, actor=current_user, task_id=task_id, progress=payload.progress)
    )


@router.post("/{task_id}/dependencies")
def link_dependency(
    task_id: int,
    payload: DependencyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    task = add_dependency(
        db, actor=current_user, task_id=task_id, dependency_id=payload.dependency_id
    )
    return _task_response(task)


@router.delete("/{task_id}/dependencies/{dependency_id}")
def unlink_dependency(
    task_id: int,
    dependency_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    task = remove_dependency(
        db, actor=current_user, task_id=task_id, dependency_id=dependency_id
    )
    return _task_response(task)


@router.get("/{task_id}/time")
def read_time_entries(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entries = list_time_entries(db, actor=current_user, task_id=task_id)
    return {
        "success": True,
        "count": len(entries),
        "sessions": [TimeEntryRead.model_validate(entry) for entry in entries],
    }


@router.post("/{task_id}/time/start", status_code=status.HTTP_201_CREATED)
def start_timer(
    task_id: int,
    payload: TimeTrackingRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entry = start_time_tracking(
        db,
        actor=current_user,
        task_id=task_id,
        description=payload.description if payload else None,
    )
    return {
        "success": True,
        "message": "Time tracking started",
        "session": TimeEntryRead.model_validate(entry),
    }


@router.post("/{task_id}/time/stop")
def stop_timer(
    task_id: int,
    payload: TimeTrackingRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    entry, total_hours = stop_time_tracking(
        db,
        actor=current_user,
        task_id=task_id,
        description=payload.description if payload else None,
    )
    return {
        "success": True,
        "message": "Time tracking stopped",
        "session": TimeEntryRead.model_validate(entry),
        "total_hours": total_hours,
    }
