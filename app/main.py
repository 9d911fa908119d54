"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health and the library context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Database schema creation on startup

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.infrastructure.library.database import create_schema
from app.interfaces.health import router as health_router
from app.interfaces.library.dependencies import get_engine
from app.interfaces.library.router import router as library_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: make sure the library tables exist."""
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    create_schema(engine)
    logger.info("%s %s started", settings.project_name, settings.version)
    yield
    logger.info("%s shutting down", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level, log_sql=settings.log_sql)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="Backend API for a lending library: books, members and loans.",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(library_router, prefix="/api/v1")

    return app


app = create_app()
