"""Task service: tasks, skills and the token-store endpoints."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import health, skills, tasks, tokens
from .api.errors import domain_error_handler
from .config import Settings, configure_logging, get_settings
from .container import TaskContainer, close_container, task_container_from_settings
from .errors import DomainError

logger = logging.getLogger(__name__)


def create_app(container: Optional[TaskContainer] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the task service.

    Args:
        container: Pre-wired use cases. When omitted, the container is built
            from settings at startup and torn down at shutdown.
        settings: Defaults to the environment-derived settings.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = container is None
        app.state.container = task_container_from_settings(settings) if owned else container
        logger.info(f"Task service started ({settings.repository_backend} repositories)")
        try:
            yield
        finally:
            if owned:
                close_container(app.state.container)

    app = FastAPI(title="SkillTrack Task Service", lifespan=lifespan)
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DomainError, domain_error_handler)

    app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
    app.include_router(skills.router, prefix="/skills", tags=["skills"])
    app.include_router(tokens.router, prefix="/auth/tokens", tags=["tokens"])
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()
