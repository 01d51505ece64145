"""
API routes - Registration, login and logout endpoints.

This module defines the HTTP endpoints:
- GET/POST /user/register - Registration form and submission
- GET/POST /user/login - Login form and submission
- POST /user/logout - End the session
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from src.api.dependencies import (
    get_authentication_service,
    get_csrf_token,
    get_form_submission,
    get_registration_service,
    get_session_manager,
)
from src.api.views import respond
from src.domain import authentication, registration
from src.domain.authentication import AuthenticationService
from src.domain.outcomes import FormSubmission
from src.domain.ports import SessionManager
from src.domain.registration import RegistrationService

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/register", response_class=HTMLResponse, summary="Registration form")
def register_form(
    request: Request,
    csrf_token: str = Depends(get_csrf_token),
) -> Response:
    return respond(request, registration.registration_form(csrf_token))


@router.post("/register", response_class=HTMLResponse, summary="Register a new user")
def register(
    request: Request,
    submission: FormSubmission = Depends(get_form_submission),
    service: RegistrationService = Depends(get_registration_service),
) -> Response:
    """
    Register a new user from the submitted form.

    Redirects to / on success; re-renders the form with every validation
    message otherwise.
    """
    return respond(request, service.register(submission))


@router.get("/login", response_class=HTMLResponse, summary="Login form")
def login_form(
    request: Request,
    csrf_token: str = Depends(get_csrf_token),
) -> Response:
    return respond(request, authentication.login_form(csrf_token))


@router.post("/login", response_class=HTMLResponse, summary="Log in")
def login(
    request: Request,
    submission: FormSubmission = Depends(get_form_submission),
    service: AuthenticationService = Depends(get_authentication_service),
) -> Response:
    """
    Authenticate with email address and password.

    Unknown email and wrong password produce the same generic error.
    """
    return respond(request, service.login(submission))


@router.post("/logout", summary="Log out")
def logout(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> Response:
    """End the session and redirect to the login page."""
    return respond(request, authentication.logout(sessions))
