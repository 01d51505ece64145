"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import HTMLResponse, Response
from psycopg_pool import ConnectionPool
from starlette.middleware.sessions import SessionMiddleware

from src.adapters.repository.postgres import run_migrations
from src.api.csrf import configure_csrf
from src.api.dependencies import get_session_manager
from src.api.routes import router as user_router
from src.api.views import templates
from src.config.settings import DEFAULT_SECRET_KEY, Settings, get_settings
from src.domain.exceptions import PersistenceError
from src.domain.ports import SessionManager

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "user",
        "description": "Account registration, login and logout forms",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool in app state for dependency injection
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


def _error_page(request: Request) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": "Error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def persistence_error_handler(request: Request, exc: PersistenceError) -> Response:
    """
    Render a generic error page for user store failures.

    The page carries no detail from the exception; the cause goes to the log.
    """
    logger.error(
        "Persistence failure during %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_page(request)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    """
    Render the same generic error page for any other uncaught exception.

    Starlette re-raises the exception after sending this response, so the
    server still records it.
    """
    logger.error(
        "Unhandled error during %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_page(request)


def home(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> Response:
    """Landing page; shows whether the visitor is logged in."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": "Home", "user_id": sessions.current_user_id()},
    )


async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Overrides the environment-derived settings (tests)
    """
    settings = settings or get_settings()

    if DEFAULT_SECRET_KEY in (settings.session_secret_key, settings.csrf_secret_key):
        logger.warning("Using the default secret key; set SESSION_SECRET_KEY and CSRF_SECRET_KEY")

    application = FastAPI(
        title="portal-auth",
        description="Server-rendered user registration, login and logout",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    application.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.session_https_only,
    )
    application.add_exception_handler(PersistenceError, persistence_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)
    configure_csrf(settings)

    application.include_router(user_router)
    application.add_api_route("/", home, methods=["GET"], response_class=HTMLResponse)
    application.add_api_route("/health", health_check, methods=["GET"])

    return application


app = create_app()
