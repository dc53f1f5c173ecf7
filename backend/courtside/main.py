# backend/courtside/main.py
"""
Courtside API application.

Run locally with:
    uvicorn courtside.main:app --reload
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from .core.config import is_running_tests, settings
from .core.constants import BRAND_NAME
from .database import create_all, dispose_engine, init_engine
from .errors import register_error_handlers
from .routes.v1 import admin as admin_v1
from .routes.v1 import bookings as bookings_v1
from .routes.v1 import catalog as catalog_v1
from .routes.v1 import health as health_v1
from .routes.v1 import pricing as pricing_v1

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the booking store at startup and release it at shutdown."""
    logger.info("%s API starting up...", BRAND_NAME)
    logger.info(
        "Environment: %s (facility timezone %s, lock backend %s)",
        settings.environment,
        settings.facility_timezone,
        settings.lock_backend,
    )
    engine = init_engine(settings.database_url)
    if settings.create_schema_on_startup:
        create_all(engine)
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    try:
        yield
    finally:
        dispose_engine()
        logger.info("%s API shut down", BRAND_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    register_error_handlers(app)

    api_v1 = APIRouter(prefix="/api/v1")
    # /bookings/all must stay ahead of /bookings/{booking_id} inside the bookings router
    api_v1.include_router(bookings_v1.router, prefix="/bookings")
    api_v1.include_router(pricing_v1.router, prefix="/pricing")
    api_v1.include_router(catalog_v1.router)
    api_v1.include_router(admin_v1.router, prefix="/admin")

    app.include_router(api_v1)
    app.include_router(health_v1.router)
    return app


app = create_app()
