# Schemas package: request payload validation shared by the routes and services.

from app.schemas.contact import (  # noqa: F401
    ContactSubmission,
    SubmissionInvalid,
    ValidationIssue,
    validate_field,
    validate_submission,
)
