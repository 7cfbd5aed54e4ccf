"""Mailtrap Sending API client.

Thin wrapper around POST https://send.api.mailtrap.io/api/send.
Authenticates with a Sending API token (Bearer). One client instance is
built per contact submission and reused for both emails.

Usage:
    from app.services.mailtrap_client import MailtrapClient, address

    client = MailtrapClient(token)
    resp = client.send({
        "from": address("hello@example.com", "Example"),
        "to": [address("someone@example.com")],
        "subject": "Hello",
        "text": "Hi",
        "category": "contact_form",
    })
    resp["message_ids"]
"""

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://send.api.mailtrap.io/api/send"


class MailtrapError(Exception):
    """Raised when the Mailtrap API rejects a send.

    Chained (``raise ... from``) to the requests.HTTPError that carries the
    raw response, so callers can inspect ``err.__cause__.response``.
    """

    def __init__(self, message, status=None, errors=None):
        super().__init__(message)
        self.status = status
        self.errors = errors or []


def address(email, name=None):
    """Build a Mailtrap address object."""
    addr = {"email": email}
    if name:
        addr["name"] = name
    return addr


class MailtrapClient:
    """Minimal Mailtrap Sending API client backed by a requests.Session."""

    def __init__(self, token, api_url=DEFAULT_API_URL, timeout=30, session=None):
        if not token:
            raise ValueError("Mailtrap token is required.")
        self.api_url = api_url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "melius-site",
        })

    def __repr__(self):
        # Never show the token.
        return f"<MailtrapClient {self.api_url}>"

    def close(self):
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def send(self, mail: dict) -> dict:
        """Send one email. Returns the decoded JSON body on 2xx.

        Raises MailtrapError on 4xx/5xx; transport failures propagate as
        requests.RequestException.
        """
        # Drop empty optional fields (e.g. no bcc configured).
        payload = {k: v for k, v in mail.items() if v not in (None, [], "")}

        resp = self.session.post(self.api_url, json=payload, timeout=self.timeout)

        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            errors = _error_list(resp)
            # Status only; the body can echo credentials back.
            logger.warning(f"Mailtrap rejected send ({resp.status_code} {resp.reason})")
            raise MailtrapError(
                "; ".join(errors) or f"Mailtrap API returned {resp.status_code}",
                status=resp.status_code,
                errors=errors,
            ) from e

        try:
            return resp.json()
        except ValueError:
            return {}


def _error_list(resp):
    """Pull Mailtrap's ``errors`` / ``error`` / ``message`` out of a failed response."""
    try:
        body = resp.json()
    except ValueError:
        return []
    if not isinstance(body, dict):
        return []

    errors = body.get("errors")
    if isinstance(errors, list):
        return [str(e) for e in errors]
    if isinstance(errors, str):
        return [errors]
    for key in ("error", "message"):
        if isinstance(body.get(key), str):
            return [body[key]]
    return []
