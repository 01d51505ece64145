"""
Validation rule sets for the account forms.

A rule set is an ordered tuple of FieldCheck declarations. ``validate()``
evaluates every rule of every field against the submitted values and
returns the failure messages in declaration order. A failing rule never
stops evaluation of the rules after it, so a single field can contribute
several messages.

Rules are plain predicates of ``(value, fields)``; ``fields`` gives access
to co-submitted values for cross-field checks such as password
confirmation. An absent field is evaluated as the empty string.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

Predicate = Callable[[str, Mapping[str, str]], bool]

PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*"

# One lookahead per character class; searched, so position does not matter.
_PASSWORD_PATTERN = re.compile(
    r"(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[" + re.escape(PASSWORD_SPECIAL_CHARACTERS) + r"])",
    re.DOTALL,
)


@dataclass(frozen=True)
class Rule:
    predicate: Predicate
    message: str


@dataclass(frozen=True)
class FieldCheck:
    field: str
    rules: tuple[Rule, ...]


def present(value: str, fields: Mapping[str, str]) -> bool:
    """Value exists and is not blank."""
    return bool(value and value.strip())


def max_length(limit: int) -> Predicate:
    def check(value: str, fields: Mapping[str, str]) -> bool:
        return len(value) <= limit

    return check


def is_email(value: str, fields: Mapping[str, str]) -> bool:
    """Syntactic email check; no DNS lookups."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_strong_password(value: str, fields: Mapping[str, str]) -> bool:
    """At least one lowercase, uppercase, digit and special character."""
    return _PASSWORD_PATTERN.search(value) is not None


def equals_field(other: str) -> Predicate:
    def check(value: str, fields: Mapping[str, str]) -> bool:
        return value == (fields.get(other) or "")

    return check


def validate(checks: tuple[FieldCheck, ...], fields: Mapping[str, str]) -> list[str]:
    """
    Evaluate a rule set against submitted form fields.

    Args:
        checks: Ordered field checks
        fields: Submitted field name -> value mapping

    Returns:
        Failure messages in declaration order; empty when the form is valid
    """
    errors: list[str] = []
    for check in checks:
        value = fields.get(check.field) or ""
        for rule in check.rules:
            if not rule.predicate(value, fields):
                errors.append(rule.message)
    return errors


REGISTRATION_RULES: tuple[FieldCheck, ...] = (
    FieldCheck(
        "firstName",
        (
            Rule(present, "Please provide a value for First Name"),
            Rule(max_length(50), "First Name must not be more than 50 characters long"),
        ),
    ),
    FieldCheck(
        "lastName",
        (
            Rule(present, "Please provide a value for Last Name"),
            Rule(max_length(50), "Last Name must not be more than 50 characters long"),
        ),
    ),
    FieldCheck(
        "emailAddress",
        (
            Rule(present, "Please provide a value for Email Address"),
            Rule(max_length(255), "Email Address must not be more than 255 characters long"),
            Rule(is_email, "Email Address is not a valid email"),
        ),
    ),
    FieldCheck(
        "password",
        (
            Rule(present, "Please provide a value for Password"),
            Rule(max_length(50), "Password must not be more than 50 characters long"),
            Rule(
                is_strong_password,
                "Password must contain at least 1 lowercase letter, uppercase letter, "
                f'number, and special character (i.e. "{PASSWORD_SPECIAL_CHARACTERS}")',
            ),
        ),
    ),
    FieldCheck(
        "confirmPassword",
        (
            Rule(present, "Please provide a value for Confirm Password"),
            Rule(max_length(50), "Confirm Password must not be more than 50 characters long"),
            Rule(equals_field("password"), "Confirm Password does not match Password"),
        ),
    ),
)

LOGIN_RULES: tuple[FieldCheck, ...] = (
    FieldCheck("emailAddress", (Rule(present, "Please provide a value for Email Address"),)),
    FieldCheck("password", (Rule(present, "Please provide a value for Password"),)),
)


def validate_registration(fields: Mapping[str, str]) -> list[str]:
    return validate(REGISTRATION_RULES, fields)


def validate_login(fields: Mapping[str, str]) -> list[str]:
    return validate(LOGIN_RULES, fields)
