"""
Registration domain service.

Flow for POST /user/register:

1. Build a candidate User from the submitted name and email fields
   (the password is never put on the candidate in plaintext).
2. Evaluate the registration rule set against the raw fields.
3. Valid: hash the password, persist the user, establish a session,
   redirect home.
4. Invalid: re-render the form with the candidate and every error message.

Persistence and session side effects happen only on the success path.
Store failures (including a duplicate email) propagate as PersistenceError.
"""

import logging
from dataclasses import dataclass

from .outcomes import FlowResult, FormSubmission, Redirect, Render
from .passwords import DEFAULT_COST, hash_password
from .ports import SessionManager, UserRepository
from .user import User
from .validation import validate_registration

logger = logging.getLogger(__name__)

REGISTER_TEMPLATE = "user-register.html"
REGISTER_TITLE = "Register"
HOME_PATH = "/"


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates validation, password hashing, persistence and session
    creation for a single form submission.
    """

    repository: UserRepository
    sessions: SessionManager
    bcrypt_cost: int = DEFAULT_COST

    def register(self, submission: FormSubmission) -> FlowResult:
        """
        Register a new user from a form submission.

        Args:
            submission: Raw form fields and the CSRF token for a re-render

        Returns:
            Redirect home on success, otherwise a Render of the form with errors

        Raises:
            PersistenceError: If the user store fails or the email is taken
        """
        user = User(
            email_address=submission.get("emailAddress"),
            first_name=submission.get("firstName"),
            last_name=submission.get("lastName"),
        )

        errors = validate_registration(submission.fields)
        if errors:
            logger.info("Registration rejected with %d validation error(s)", len(errors))
            return _render(user, errors, submission.csrf_token)

        user.hashed_password = hash_password(submission.get("password"), self.bcrypt_cost)
        user = self.repository.save(user)
        self.sessions.establish_session(user)

        logger.info("Registered user id=%s", user.id)
        return Redirect(HOME_PATH)


def registration_form(csrf_token: str) -> Render:
    """Empty registration form."""
    return _render(User(), [], csrf_token)


def _render(user: User, errors: list[str], csrf_token: str) -> Render:
    return Render(
        REGISTER_TEMPLATE,
        {
            "title": REGISTER_TITLE,
            "user": user,
            "errors": errors,
            "csrf_token": csrf_token,
        },
    )
