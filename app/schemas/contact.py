"""Contact form schema.

One rule table drives both entry points:

- validate_submission(data): whole-object check used by the server before
  any email goes out. Returns a trimmed ContactSubmission or raises
  SubmissionInvalid with every field-level issue.
- validate_field(field, value): single-field check used at blur time by the
  contact modal (via POST /contact/validate). Returns the first violated
  rule's message, or "" when the value is fine.

Rules run in order per field and stop at the first failure.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_core import PydanticCustomError

NAME_MIN, NAME_MAX = 2, 100
MESSAGE_MIN, MESSAGE_MAX = 10, 2000


class Rule(NamedTuple):
    code: str
    check: Callable[[str], bool]
    message: str


def _is_email(value: str) -> bool:
    """Syntax-only check; no DNS lookups on the request path.

    The domain needs a period. Reserved ``.test`` domains are accepted.
    """
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


RULES: dict[str, list[Rule]] = {
    "name": [
        Rule("required", lambda v: len(v) >= 1, "Name is required"),
        Rule("too_short", lambda v: len(v) >= NAME_MIN, "Name must be at least 2 characters"),
        Rule("too_long", lambda v: len(v) <= NAME_MAX, "Name must be less than 100 characters"),
    ],
    "email": [
        Rule("required", lambda v: len(v) >= 1, "Email is required"),
        Rule("invalid_email", _is_email, "Please enter a valid email address"),
    ],
    "message": [
        Rule("required", lambda v: len(v) >= 1, "Message is required"),
        Rule("too_short", lambda v: len(v) >= MESSAGE_MIN, "Message must be at least 10 characters"),
        Rule("too_long", lambda v: len(v) <= MESSAGE_MAX, "Message must be less than 2000 characters"),
    ],
}

FIELDS = tuple(RULES)


def _normalize(value: Any) -> str:
    # Anything that isn't a string counts as missing.
    if not isinstance(value, str):
        return ""
    return value.strip()


def first_violation(field: str, value: Any) -> Rule | None:
    """Return the first rule ``value`` breaks for ``field``, or None."""
    text = _normalize(value)
    for rule in RULES[field]:
        if not rule.check(text):
            return rule
    return None


def validate_field(field: str, value: Any) -> str:
    """Single-field validation. Raises KeyError for unknown fields."""
    if field not in RULES:
        raise KeyError(field)
    rule = first_violation(field, value)
    return rule.message if rule else ""


@dataclass(frozen=True)
class ValidationIssue:
    path: tuple[str, ...]
    message: str
    code: str

    @property
    def field(self) -> str | None:
        return self.path[0] if self.path else None

    def to_dict(self) -> dict:
        return {"path": list(self.path), "message": self.message, "code": self.code}


class SubmissionInvalid(Exception):
    """Raised when a payload fails the contact schema."""

    def __init__(self, issues):
        super().__init__(issues)
        self.issues: list[ValidationIssue] = list(issues)

    def __str__(self):
        return "; ".join(f"{i.field or 'form'}: {i.message}" for i in self.issues)

    def field_errors(self) -> dict[str, str]:
        """First message per field, the shape the modal renders inline."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.field and issue.field not in errors:
                errors[issue.field] = issue.message
        return errors


class ContactSubmission(BaseModel):
    """A validated, trimmed contact form submission. Never persisted."""

    model_config = ConfigDict(frozen=True, extra="ignore", validate_default=True)

    name: str = ""
    email: str = ""
    message: str = ""

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def _apply_rules(cls, value, info):
        rule = first_violation(info.field_name, value)
        if rule is not None:
            raise PydanticCustomError(rule.code, rule.message)
        return _normalize(value)


def validate_submission(data: Any) -> ContactSubmission:
    """Whole-object validation. All-or-nothing: raises SubmissionInvalid on any issue."""
    if not isinstance(data, Mapping):
        raise SubmissionInvalid([
            ValidationIssue((), "Expected an object with name, email and message", "invalid_type")
        ])

    try:
        return ContactSubmission.model_validate(dict(data))
    except ValidationError as e:
        raise SubmissionInvalid([
            ValidationIssue(
                path=tuple(str(part) for part in err["loc"]),
                message=err["msg"],
                code=err["type"],
            )
            for err in e.errors()
        ]) from None
