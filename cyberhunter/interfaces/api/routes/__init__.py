from fastapi import FastAPI

from .admin import router as admin_router
from .auth import router as auth_router
from .chats import router as chats_router
from .health import router as health_router
from .notifications import router as notifications_router
from .projects import router as projects_router
from .tasks import router as tasks_router
from .teams import router as teams_router
from .users import router as users_router
from .ws import router as ws_router

API_PREFIX = "/api"


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    for router in (
        auth_router,
        users_router,
        projects_router,
        teams_router,
        tasks_router,
        chats_router,
        notifications_router,
        admin_router,
    ):
        app.include_router(router, prefix=API_PREFIX)
    app.include_router(health_router)
    app.include_router(ws_router)
