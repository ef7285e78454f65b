"""Auth service: registration, login and session refresh."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import auth, health
from .api.errors import domain_error_handler
from .config import Settings, configure_logging, get_settings
from .container import AuthContainer, auth_container_from_settings, close_container
from .errors import DomainError

logger = logging.getLogger(__name__)


def create_app(container: Optional[AuthContainer] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = container is None
        app.state.container = auth_container_from_settings(settings) if owned else container
        logger.info(f"Auth service started ({settings.repository_backend} repositories)")
        try:
            yield
        finally:
            if owned:
                close_container(app.state.container)

    app = FastAPI(title="SkillTrack Auth Service", lifespan=lifespan)
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

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()
