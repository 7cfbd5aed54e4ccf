"""
Email composition for the contact form.

Renders the two transactional emails sent per submission into Mailtrap
send payloads:

1. Owner notification — lead details to the firm, reply-to the visitor.
2. Acknowledgment — thank-you note to the visitor, reply-to the firm.

HTML bodies only ever see escaped values (see sanitize_submission); the
plain-text fallbacks get the raw, trimmed values.

Usage:
    from app.services.email_service import compose_owner_notification

    mail = compose_owner_notification(submission, settings)
    client.send(mail)
"""

from typing import NamedTuple

from flask import render_template
from markupsafe import Markup, escape

from app.services.mailtrap_client import address

OWNER_CATEGORY = "contact_form"
ACK_CATEGORY = "thank_you"
ACK_SUBJECT = "Thank you for reaching out to Melius"


class SanitizedSubmission(NamedTuple):
    """HTML-safe copies of the submission fields."""

    name: Markup
    email: Markup
    message: Markup


def sanitize_submission(submission) -> SanitizedSubmission:
    """Escape & < > " ' in every field; message newlines become <br>."""
    lines = submission.message.replace("\r\n", "\n").split("\n")
    return SanitizedSubmission(
        name=escape(submission.name),
        email=escape(submission.email),
        message=Markup("<br>").join(escape(line) for line in lines),
    )


def owner_subject(name):
    return f"[MELIUS LEAD] - Contact form fill by {name}"


def compose_owner_notification(submission, settings, safe=None):
    """Build the lead notification sent to the operator."""
    safe = safe or sanitize_submission(submission)

    return {
        "from": address(settings.sender_email, settings.sender_name),
        "to": [address(settings.recipient_email)],
        "bcc": [address(settings.bcc_email)] if settings.bcc_email else None,
        "reply_to": address(submission.email),
        "subject": owner_subject(submission.name),
        "text": render_template(
            "emails/contact_notification.txt",
            name=submission.name,
            email=submission.email,
            message=submission.message,
        ),
        "html": render_template(
            "emails/contact_notification.html",
            name=safe.name,
            email=safe.email,
            message=safe.message,
        ),
        "category": OWNER_CATEGORY,
    }


def compose_acknowledgment(submission, settings, safe=None):
    """Build the thank-you email sent back to the visitor.

    Deliberately carries nothing from the submitted message.
    """
    safe = safe or sanitize_submission(submission)

    return {
        "from": address(settings.sender_email, settings.acknowledgment_sender_name),
        "to": [address(submission.email, submission.name)],
        "reply_to": address(settings.recipient_email),
        "subject": ACK_SUBJECT,
        "text": render_template(
            "emails/contact_acknowledgment.txt",
            name=submission.name,
            signature=settings.signature_name,
        ),
        "html": render_template(
            "emails/contact_acknowledgment.html",
            name=safe.name,
            signature=settings.signature_name,
        ),
        "category": ACK_CATEGORY,
    }
