"""Session adapters - Request session implementations."""

from .cookie import CookieSessionManager

__all__ = ["CookieSessionManager"]
