"""Contact submission handler — the only code that talks to Mailtrap.

submit_contact() takes an untrusted payload and always returns a
SubmissionResult; it never raises. Steps:

1. Re-validate against the contact schema (client checks are not trusted).
2. Escape the fields for the HTML bodies.
3. Bail out if no Mailtrap token is configured.
4. Send the owner notification, then the visitor acknowledgment, through
   one client instance. A failure on either send fails the whole call;
   nothing is rolled back.
5. Return the provider message ids, or a user-facing error.

Provider errors are translated into a fixed set of messages. The token is
never part of a returned message; logs only see its length and a masked
preview.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.schemas.contact import SubmissionInvalid, validate_submission
from app.services.email_service import (
    compose_acknowledgment,
    compose_owner_notification,
    sanitize_submission,
)
from app.services.mailtrap_client import MailtrapClient

logger = logging.getLogger(__name__)

# Failure kinds, used by the route to pick an HTTP status.
VALIDATION = "validation"
NOT_CONFIGURED = "not_configured"
PROVIDER = "provider"

INVALID_FORM_DATA = "Invalid form data"
NOT_CONFIGURED_MESSAGE = (
    "Email service is not configured. Please contact support directly."
)
GENERIC_AUTH_MESSAGE = (
    "Mailtrap authentication or configuration error. "
    "Please verify your API token and domain settings."
)
FALLBACK_MESSAGE = "Failed to send email. Please check your Mailtrap configuration."


@dataclass
class SubmissionResult:
    success: bool
    message_ids: list[str] = field(default_factory=list)
    error: str | None = None
    details: list[dict] | None = None
    kind: str | None = None

    @classmethod
    def failed(cls, error, kind, details=None):
        return cls(success=False, error=error, details=details, kind=kind)

    def to_dict(self) -> dict:
        """JSON shape consumed by the contact modal."""
        if self.success:
            return {"success": True, "messageIds": list(self.message_ids)}
        out = {"success": False, "error": self.error}
        if self.details is not None:
            out["details"] = self.details
        return out


# ──────────────────────────────────────────────
# Provider error normalization
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ProviderResponse:
    """Status and body of a failed provider call, however it was nested."""

    status: int | None
    body: Any = None
    status_text: str | None = None


def _get(obj, name):
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_status(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _normalize_response(resp) -> ProviderResponse:
    # requests.Response is falsy for 4xx/5xx, so compare against None only.
    status = _as_status(_get(resp, "status_code"))
    if status is None:
        status = _as_status(_get(resp, "status"))

    body = _get(resp, "data")
    if body is None:
        body = _get(resp, "body")
    if body is None and not isinstance(resp, Mapping) and callable(getattr(resp, "json", None)):
        try:
            body = resp.json()
        except ValueError:
            body = getattr(resp, "text", None) or None

    status_text = _get(resp, "statusText") or _get(resp, "reason")
    if not isinstance(status_text, str):
        status_text = None

    return ProviderResponse(status=status, body=body, status_text=status_text)


def extract_provider_response(error) -> ProviderResponse | None:
    """Find the provider response on an error, nested under a cause or not.

    Looks at ``error.cause.response``, ``error.__cause__.response`` and
    ``error.response``, in that order. Returns None when no response is
    attached.
    """
    for cause in (_get(error, "cause"), getattr(error, "__cause__", None)):
        if cause is None:
            continue
        resp = _get(cause, "response")
        if resp is not None:
            return _normalize_response(resp)

    resp = _get(error, "response")
    if resp is not None:
        return _normalize_response(resp)
    return None


def _body_detail(body, default="Authentication failed"):
    """Best-effort human-readable detail from a provider error body."""
    if not isinstance(body, Mapping):
        return default
    if isinstance(body.get("message"), str):
        return body["message"]
    if body.get("errors"):
        return json.dumps(body["errors"], default=str)
    if isinstance(body.get("error"), str):
        return body["error"]
    return json.dumps(dict(body), default=str)


def classify_send_error(error, settings) -> str:
    """Translate a send failure into a user-facing message."""
    response = extract_provider_response(error)

    if response is not None:
        # The provider may echo the token back in its error body.
        logger.error(_redact(
            f"Mailtrap API error: status={response.status} {response.status_text or ''} "
            f"body={json.dumps(response.body, default=str)} "
            f"sender={settings.sender_email} "
            f"token_configured={bool(settings.token)} "
            f"token_length={len(settings.token or '')} "
            f"token_preview={settings.token_preview}",
            settings.token,
        ))

        if response.status == 401:
            detail = _body_detail(response.body)
            return (
                f"Authentication failed (401): {detail}. Please verify: "
                f"1) Your MAILTRAP_TOKEN is a Sending API token (not Testing), "
                f"2) Your domain is fully verified in Mailtrap, "
                f"3) The sender email ({settings.sender_email}) matches your "
                f"verified domain exactly."
            )
        if response.status == 422:
            return (
                f"Invalid email configuration (422). Please verify your sender "
                f"email domain in Mailtrap and ensure the sender email "
                f"({settings.sender_email}) matches your verified domain exactly."
            )
        if response.status == 400:
            body = response.body
            if isinstance(body, Mapping) and isinstance(body.get("message"), str):
                hint = body["message"]
            else:
                hint = "Please check your email configuration."
            return f"Invalid request (400). {hint}"

    if _as_status(_get(error, "status")) in (401, 422):
        return GENERIC_AUTH_MESSAGE

    return str(error) or FALLBACK_MESSAGE


def _redact(text, token):
    if token and text:
        return text.replace(token, "***")
    return text


def _message_ids(resp):
    ids = _get(resp, "message_ids") if resp is not None else None
    return list(ids or [])


# ──────────────────────────────────────────────
# Handler
# ──────────────────────────────────────────────

def submit_contact(payload, settings, client_factory=None) -> SubmissionResult:
    """Validate a contact payload and send both emails.

    Args:
        payload:        Untrusted data, normally the request's JSON body.
        settings:       MailSettings resolved at startup.
        client_factory: Callable building the provider client from a token;
                        defaults to MailtrapClient.

    Returns a SubmissionResult; never raises.
    """
    try:
        submission = validate_submission(payload)
    except SubmissionInvalid as e:
        logger.info(f"Contact form rejected: {e}")
        return SubmissionResult.failed(
            INVALID_FORM_DATA,
            kind=VALIDATION,
            details=[issue.to_dict() for issue in e.issues],
        )

    safe = sanitize_submission(submission)

    if not settings.token:
        logger.error("MAILTRAP_TOKEN is not configured")
        return SubmissionResult.failed(NOT_CONFIGURED_MESSAGE, kind=NOT_CONFIGURED)

    client_factory = client_factory or MailtrapClient
    client = None

    try:
        client = client_factory(
            settings.token, api_url=settings.api_url, timeout=settings.timeout
        )

        # 1. Notification to the firm (reply-to = the visitor)
        owner_resp = client.send(compose_owner_notification(submission, settings, safe))

        # 2. Thank-you to the visitor
        ack_resp = client.send(compose_acknowledgment(submission, settings, safe))
    except Exception as e:
        logger.error(f"Error sending email via Mailtrap: {_redact(repr(e), settings.token)}")
        message = _redact(classify_send_error(e, settings), settings.token)
        return SubmissionResult.failed(message, kind=PROVIDER)
    finally:
        if client is not None:
            client.close()

    logger.info(f"Contact form submitted by {submission.name} <{submission.email}>")

    return SubmissionResult(
        success=True,
        message_ids=_message_ids(owner_resp) + _message_ids(ack_resp),
    )
