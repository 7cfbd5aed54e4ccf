"""
Contact form blueprint.

Backs the landing page contact modal:
  POST /contact/send      — full submission; notifies the firm and thanks the visitor
  POST /contact/validate  — single-field check for inline errors on blur
"""

import logging

from flask import Blueprint, jsonify, request, current_app

from app.extensions import limiter
from app.schemas.contact import FIELDS, validate_field
from app.services.contact_service import (
    NOT_CONFIGURED,
    PROVIDER,
    VALIDATION,
    submit_contact,
)

contact_bp = Blueprint("contact", __name__, url_prefix="/contact")

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    VALIDATION: 422,
    NOT_CONFIGURED: 503,
    PROVIDER: 502,
}


def _contact_rate_limit():
    return current_app.config.get("CONTACT_RATE_LIMIT", "5 per hour")


@contact_bp.route("/send", methods=["POST"])
@limiter.limit(_contact_rate_limit)
def send_contact():
    """
    Accept a JSON contact form submission.

    Expects: { name, email, message }
    Returns: { success: true, messageIds: [...] }
          or { success: false, error: "...", details?: [...] }
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify(success=False, error="Invalid request."), 400

    settings = current_app.extensions["mail_settings"]
    result = submit_contact(data, settings)

    status = 200 if result.success else STATUS_BY_KIND.get(result.kind, 500)
    return jsonify(result.to_dict()), status


@contact_bp.route("/validate", methods=["POST"])
def validate():
    """
    Validate one field of the contact form.

    Expects: { field, value }
    Returns: { field, error } — error is "" when the value is fine.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify(field=None, error="Invalid request."), 400

    field = data.get("field")

    if field not in FIELDS:
        return jsonify(field=field, error="Unknown field."), 400

    return jsonify(field=field, error=validate_field(field, data.get("value"))), 200
