"""Administrator endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.admin import (
    delete_user,
    get_dashboard_stats,
    get_system_stats,
    list_all_projects,
    list_users,
    remove_project,
    update_user,
)
from cyberhunter.application.use_cases.users import get_user
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_page, require_admin
from cyberhunter.interfaces.api.schemas import (
    AdminUserUpdate,
    MessageResponse,
    ProjectRead,
    UserRead,
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    stats = get_dashboard_stats(db)
    return {
        "success": True,
        "stats": {
            "users": stats.users,
            "projects": stats.projects,
            "teams": stats.teams,
            "tasks": stats.tasks,
            "usersByRole": stats.users_by_role,
            "projectsByStatus": stats.projects_by_status,
            "totalProjectValue": stats.total_project_value,
            "completedProjectValue": stats.completed_project_value,
        },
        "recentUsers": [UserRead.model_validate(user) for user in stats.recent_users],
        "recentProjects": [ProjectRead.model_validate(item) for item in stats.recent_projects],
    }


@router.get("/system")
def system_stats(db: Session = Depends(get_db)):
    stats = get_system_stats(db)
    return {
        "success": True,
        "labels": stats.labels,
        "users": stats.users,
        "projects": stats.projects,
        "budgets": stats.budgets,
    }

@router.get("/users")
def browse_users(
    role: str | None = None,
    search: str | None = None,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
):
    users, total = list_users(db, page=page, role=role, search=search)
    return page_envelope("users", [UserRead.model_validate(user) for user in users], total, page)


@router.get("/users/{user_id}")
def read_user(user_id: int, db: Session = Depends(get_db)):
    return {"success": True, "user": UserRead.model_validate(get_user(db, user_id))}


@router.put("/users/{user_id}")
def edit_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    user = update_user(
        db,
        user_id=user_id,
        name=payload.name,
        role=payload.role,
        is_active=payload.is_active,
        is_verified=payload.is_verified,
    )
    return {"success": True, "user": UserRead.model_validate(user)}


@router.delete("/users/{user_id}", response_model=MessageResponse)
def remove_user(user_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    delete_user(db, user_id=user_id)
    return MessageResponse(message="User deleted successfully")


@router.get("/projects")
def browse_projects(
    status: str | None = None,
    search: str | None = None,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
):
    projects, total = list_all_projects(db, page=page, status=status, search=search)
    return page_envelope(
        "projects", [ProjectRead.model_validate(project) for project in projects], total, page
    )


@router.delete("/projects/{project_id}", response_model=MessageResponse)
def delete_project(project_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    remove_project(db, project_id=project_id)
    return MessageResponse(message="Project deleted successfully")
