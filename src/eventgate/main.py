from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.eventgate.api.middlewares import setup_middlewares
from src.eventgate.api.v1.router import api_router
from src.eventgate.core.config import get_settings
from src.eventgate.core.db import dispose_engine
from src.eventgate.core.exceptions import setup_exception_handlers
from src.eventgate.core.health import setup_health_endpoint, setup_metrics
from src.eventgate.core.logging import get_logger, setup_logging
from src.eventgate.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "SSO exchange and bearer verification"},
    {"name": "users", "description": "Principal profile operations"},
    {"name": "admin", "description": "Platform administration"},
    {"name": "tenants", "description": "Public tenant information and tenant admins"},
    {"name": "events", "description": "Events, registrations and gate scanning"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant event registration with single-use QR credentials",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
