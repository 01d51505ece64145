"""
View rendering - turns flow outcomes into HTTP responses.

Render outcomes go through Jinja2 templates in ``src/api/templates``;
Redirect outcomes become 303 See Other so the browser follows with a GET.
Either way the CSRF cookie is brought in line with the rendered form.
"""

from pathlib import Path

from fastapi import Request, status
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from src.api.csrf import attach_csrf_cookie, get_csrf_protect
from src.domain.outcomes import FlowResult, Redirect

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def respond(request: Request, result: FlowResult) -> Response:
    """Convert a flow outcome into a response."""
    if isinstance(result, Redirect):
        response: Response = RedirectResponse(result.target, status_code=status.HTTP_303_SEE_OTHER)
    else:
        response = templates.TemplateResponse(request, result.template, dict(result.context))
    attach_csrf_cookie(request, response, get_csrf_protect())
    return response
