"""
Flow inputs and outcomes.

Each flow takes a FormSubmission and answers with either a Redirect or a
Render; the API layer turns these into HTTP responses.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FormSubmission:
    """Submitted form fields plus the CSRF token to embed in any re-render."""

    fields: Mapping[str, str]
    csrf_token: str

    def get(self, name: str) -> str:
        return self.fields.get(name) or ""


@dataclass(frozen=True)
class Redirect:
    target: str


@dataclass(frozen=True)
class Render:
    template: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def errors(self) -> list[str]:
        return self.context.get("errors", [])


FlowResult = Redirect | Render
