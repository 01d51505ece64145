"""
Cookie session adapter - Implements SessionManager protocol.

This module provides a SessionManager on top of the signed cookie session
that Starlette's SessionMiddleware attaches to each request. The
authenticated identity lives under a single ``auth`` key; the rest of the
session (for example the CSRF secret) is left alone.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

from src.domain.user import User

logger = logging.getLogger(__name__)

AUTH_KEY = "auth"


class CookieSessionManager:
    """
    Implements SessionManager protocol over a request's session mapping.

    Uses structural subtyping - no explicit inheritance from Protocol.
    One instance per request.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def establish_session(self, user: User) -> None:
        """
        Record the user as logged in for this session.

        Only the user id is stored; the cookie never carries the email
        address or the password hash.
        """
        if user.id is None:
            raise ValueError("Cannot establish a session for an unsaved user")
        self._session[AUTH_KEY] = {"user_id": user.id}
        logger.info("Session established for user id=%s", user.id)

    def end_session(self) -> None:
        """Drop the authenticated identity; a no-op for anonymous sessions."""
        auth = self._session.pop(AUTH_KEY, None)
        if auth is not None:
            logger.info("Session ended for user id=%s", auth.get("user_id"))

    def current_user_id(self) -> int | None:
        auth = self._session.get(AUTH_KEY)
        if not auth:
            return None
        return auth.get("user_id")
