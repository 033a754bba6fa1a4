"""
Maps access-control errors onto HTTP responses.

Forbidden is always answered with 403, never 404, so that a missing right
and a missing resource stay distinguishable for the client.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..permissions.errors import AccessControlError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


async def access_control_error_handler(request: Request, exc: AccessControlError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the access-control exception handlers on an application."""
    app.add_exception_handler(AccessControlError, access_control_error_handler)
