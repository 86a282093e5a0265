import logging
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyberhunter.config import get_settings
from cyberhunter.infrastructure.database import engine, initialize_database
from cyberhunter.infrastructure.notifications import run_outbox_worker
from cyberhunter.interfaces.api.errors import register_exception_handlers
from cyberhunter.interfaces.api.routes import register_routes

logger = logging.getLogger("cyberhunter")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema, run the outbox worker and release the engine on shutdown."""

    settings = get_settings()
    initialize_database()
    async with anyio.create_task_group() as task_group:
        if settings.outbox_poll_seconds > 0:
            task_group.start_soon(run_outbox_worker, settings.outbox_poll_seconds)
        try:
            yield
        finally:
            task_group.cancel_scope.cancel()
    engine.dispose()
    logger.info("Application shut down")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="CyberHunter API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
