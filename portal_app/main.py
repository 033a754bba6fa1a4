"""
FastAPI application hosting the portal access-control engine.

The access decision endpoints are mounted under ``/api/v1``.
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from .config import get_settings
from .lib.core.exception_handlers import register_exception_handlers
from .lib.utils.logging_utils import setup_logging, get_logger
from .routers import access


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle"""
    settings = get_settings()

    setup_logging(settings.log_level, settings.log_categories)
    logger.info("Starting portal access-control API")
    logger.info(f"Default department: {settings.default_department}")

    yield

    logger.info("Shutting down portal access-control API")


app = FastAPI(
    title="Portal Access Control",
    lifespan=lifespan
)
register_exception_handlers(app)

# Versioned API router (v1)
api_v1 = APIRouter(prefix="/api/v1", tags=["v1"])
api_v1.include_router(access.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

# Mount versioned router
app.include_router(api_v1)
