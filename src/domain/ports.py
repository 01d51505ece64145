"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the account flows require
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .user import User


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def find_by_email(self, email_address: str) -> User | None:
        """
        Look up exactly one user by exact email address match.

        Args:
            email_address: Email address as submitted

        Returns:
            The stored User, or None if no user has this address
        """
        ...

    def save(self, user: User) -> User:
        """
        Persist a new user.

        The user must already carry a hashed password.

        Args:
            user: Candidate user with hashed_password set

        Returns:
            The same user with its id assigned

        Raises:
            DuplicateEmail: If the email address is already registered
            PersistenceError: If the store is unreachable or rejects the write
        """
        ...


class SessionManager(Protocol):
    """Port interface for the authenticated session of the current request."""

    def establish_session(self, user: User) -> None:
        """Mark the current session as logged in as ``user``."""
        ...

    def end_session(self) -> None:
        """Invalidate the authenticated identity of the current session."""
        ...

    def current_user_id(self) -> int | None:
        """Return the logged-in user's id, or None for anonymous sessions."""
        ...
