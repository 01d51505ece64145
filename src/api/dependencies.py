"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi_csrf_protect import CsrfProtect
from fastapi_csrf_protect.exceptions import CsrfProtectError
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.session.cookie import CookieSessionManager
from src.api.csrf import CSRF_FORM_FIELD, get_csrf_protect, issue_csrf_token, verify_csrf_token
from src.config.settings import Settings, get_settings
from src.domain.authentication import AuthenticationService
from src.domain.outcomes import FormSubmission
from src.domain.ports import SessionManager, UserRepository
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> UserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


def get_session_manager(request: Request) -> SessionManager:
    """Wrap the request's signed cookie session."""
    return CookieSessionManager(request.session)


def get_registration_service(
    repository: UserRepository = Depends(get_repository),
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository and session manager for the domain service.
    """
    return RegistrationService(
        repository=repository,
        sessions=sessions,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_authentication_service(
    repository: UserRepository = Depends(get_repository),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthenticationService:
    """Create authentication service with injected dependencies."""
    return AuthenticationService(repository=repository, sessions=sessions)


def get_csrf_token(
    request: Request,
    csrf_protect: CsrfProtect = Depends(get_csrf_protect),
) -> str:
    """Fresh CSRF token for a rendered form."""
    return issue_csrf_token(request, csrf_protect)


async def get_form_submission(
    request: Request,
    csrf_protect: CsrfProtect = Depends(get_csrf_protect),
) -> FormSubmission:
    """
    Parse a urlencoded/multipart form and enforce CSRF protection.

    Raises:
        HTTPException: 403 if the CSRF token or cookie is missing or invalid.
            No flow runs for such requests.
    """
    try:
        await verify_csrf_token(request, csrf_protect)
    except CsrfProtectError as e:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, e.message)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid CSRF token",
        ) from e

    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}
    fields.pop(CSRF_FORM_FIELD, None)

    return FormSubmission(fields=fields, csrf_token=issue_csrf_token(request, csrf_protect))
