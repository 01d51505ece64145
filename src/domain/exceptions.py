"""
Domain exceptions - Semantic error types for account flows.

Validation and authentication failures are normal outcomes and are not
modelled here. These exceptions cover infrastructure failures that the
flows let propagate to the application's error boundary.
"""


class AuthError(Exception):
    """Base class for account domain errors."""

    pass


class PersistenceError(AuthError):
    """The user store could not complete a read or write."""

    pass


class DuplicateEmail(PersistenceError):
    """A user with this email address already exists."""

    pass
