import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ..errors import DomainError

logger = logging.getLogger(__name__)


async def domain_error_handler(request: Request, exc: DomainError):
    """Map a use-case failure to its HTTP status with the message as detail."""
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})
