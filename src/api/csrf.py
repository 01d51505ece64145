"""
CSRF protection - fastapi-csrf-protect double submit cookie.

Each rendered form carries a fresh token in its hidden ``_csrf`` field;
the matching signed token travels in an HttpOnly cookie. A submission is
accepted only when the form token matches the cookie's signature.
"""

from fastapi import Request
from fastapi.responses import Response
from fastapi_csrf_protect import CsrfProtect

from src.config.settings import Settings

CSRF_FORM_FIELD = "_csrf"


def configure_csrf(settings: Settings) -> None:
    """Load CsrfProtect's class-wide configuration from application settings."""
    CsrfProtect.load_config(
        lambda: [
            ("secret_key", settings.csrf_secret_key),
            ("cookie_key", settings.csrf_cookie_name),
            ("cookie_samesite", "lax"),
            ("cookie_secure", settings.session_https_only),
            ("max_age", settings.csrf_max_age),
            ("token_location", "body"),
            ("token_key", CSRF_FORM_FIELD),
        ]
    )


def get_csrf_protect() -> CsrfProtect:
    return CsrfProtect()


def issue_csrf_token(request: Request, csrf_protect: CsrfProtect) -> str:
    """
    Mint a token pair for a form about to be rendered.

    The signed half is parked on request.state until the response exists;
    see attach_csrf_cookie().
    """
    token, signed_token = csrf_protect.generate_csrf_tokens()
    request.state.csrf_signed_token = signed_token
    return token


async def verify_csrf_token(request: Request, csrf_protect: CsrfProtect) -> None:
    """
    Check the submitted form token against the CSRF cookie.

    Raises:
        CsrfProtectError: token or cookie missing, expired or mismatched
    """
    # validate_csrf reads the token from the parsed form once it exists
    await request.form()
    await csrf_protect.validate_csrf(request)
    request.state.csrf_validated = True


def attach_csrf_cookie(request: Request, response: Response, csrf_protect: CsrfProtect) -> None:
    """
    Set or clear the CSRF cookie on an outgoing response.

    A response that renders a form gets the signed token issued for it.
    Otherwise a response to a validated submission drops the cookie so the
    token cannot be replayed.
    """
    signed_token = getattr(request.state, "csrf_signed_token", None)
    if signed_token is not None and response.status_code < 300:
        csrf_protect.set_csrf_cookie(signed_token, response)
    elif getattr(request.state, "csrf_validated", False):
        csrf_protect.unset_csrf_cookie(response)
