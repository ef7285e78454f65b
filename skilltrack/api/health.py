"""Health check endpoints shared by both services."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe. Returns 200 OK if the process is serving requests."""
    return {"status": "ok"}


@router.get("/ready")
def readiness_check(request: Request):
    """
    Readiness probe. Checks the database and the token store when the
    service is configured with them.
    """
    container = request.app.state.container
    checks = {}

    if container.engine is not None:
        try:
            with container.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except Exception as e:
            logger.error(f"Database readiness check failed: {e}")
            checks["database"] = "unavailable"

    if container.token_store is not None:
        checks["tokenStore"] = "ok" if container.token_store.ping() else "unavailable"

    ready = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "unavailable", "checks": checks},
    )
