"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account flows (registration, login, logout),
their validation rule sets and the port interfaces the flows need from
infrastructure, keeping web framework and database concerns out.
"""

from .authentication import LOGIN_FAILED_MESSAGE, AuthenticationService, login_form, logout
from .exceptions import AuthError, DuplicateEmail, PersistenceError
from .outcomes import FlowResult, FormSubmission, Redirect, Render
from .ports import SessionManager, UserRepository
from .registration import RegistrationService, registration_form
from .user import User

__all__ = [
    "LOGIN_FAILED_MESSAGE",
    "AuthError",
    "AuthenticationService",
    "DuplicateEmail",
    "FlowResult",
    "FormSubmission",
    "PersistenceError",
    "Redirect",
    "RegistrationService",
    "Render",
    "SessionManager",
    "User",
    "UserRepository",
    "login_form",
    "logout",
    "registration_form",
]
