"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Database schema bootstrap

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from seravat.core.config import settings
from seravat.infrastructure.exchange.tables import create_schema
from seravat.interfaces.exchange.dependencies import get_db_engine
from seravat.interfaces.exchange.router import credentials_router
from seravat.interfaces.exchange.router import router as exchange_router
from seravat.interfaces.health import router as health_router
from seravat.shared.errors.handlers import register_error_handlers
from seravat.shared.logging import configure_logging
from seravat.shared.security.headers import SecurityHeadersMiddleware
from seravat.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: make sure the store tables exist."""
    create_schema(get_db_engine())
    logger.info("%s %s started", settings.project_name, settings.version)
    yield
    get_db_engine().dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
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
    app.include_router(credentials_router, prefix="/api/v1")
    app.include_router(exchange_router, prefix="/api/v1")

    return app


app = create_app()
