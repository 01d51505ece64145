"""
Authentication domain service - login and logout flows.

Login failures for an unknown email and for a wrong password produce the
same message and run the same bcrypt comparison, so neither the response
body nor its timing tells an attacker whether an account exists.
"""

import logging
from dataclasses import dataclass

from .outcomes import FlowResult, FormSubmission, Redirect, Render
from .passwords import verify_password
from .ports import SessionManager, UserRepository
from .validation import validate_login

logger = logging.getLogger(__name__)

LOGIN_TEMPLATE = "user-login.html"
LOGIN_TITLE = "Login"
LOGIN_PATH = "/user/login"
HOME_PATH = "/"

LOGIN_FAILED_MESSAGE = "Login failed for the provided email and password"


@dataclass
class AuthenticationService:
    """Domain service for logging users in and out."""

    repository: UserRepository
    sessions: SessionManager

    def login(self, submission: FormSubmission) -> FlowResult:
        """
        Authenticate an email/password pair.

        The stored user record is read and compared, never modified.

        Args:
            submission: Raw form fields and the CSRF token for a re-render

        Returns:
            Redirect home on success, otherwise a Render of the form with errors

        Raises:
            PersistenceError: If the user store cannot be read
        """
        email_address = submission.get("emailAddress")
        password = submission.get("password")

        errors = validate_login(submission.fields)
        if errors:
            return _render(email_address, errors, submission.csrf_token)

        user = self.repository.find_by_email(email_address)
        stored_hash = user.hashed_password if user is not None else None

        # Always runs bcrypt, even for unknown emails
        if verify_password(password, stored_hash) and user is not None:
            self.sessions.establish_session(user)
            logger.info("User id=%s logged in", user.id)
            return Redirect(HOME_PATH)

        logger.warning("Failed login attempt")
        return _render(email_address, [LOGIN_FAILED_MESSAGE], submission.csrf_token)


def login_form(csrf_token: str) -> Render:
    """Empty login form."""
    return _render("", [], csrf_token)


def logout(sessions: SessionManager) -> Redirect:
    """End the current session, whatever its state, and go to the login page."""
    sessions.end_session()
    return Redirect(LOGIN_PATH)


def _render(email_address: str, errors: list[str], csrf_token: str) -> Render:
    return Render(
        LOGIN_TEMPLATE,
        {
            "title": LOGIN_TITLE,
            "email_address": email_address,
            "errors": errors,
            "csrf_token": csrf_token,
        },
    )
