"""Shared test fixtures for the MELIUS site test suite.

Provides:
- app: Flask app configured for testing (CSRF and rate limiting off)
- client: Flask test client
- mail_settings: the MailSettings the app resolved at startup
- valid_payload: a contact form payload that passes every rule
- fake_mailtrap: provider client factory stub returning canned message ids
"""

from unittest.mock import MagicMock

import pytest

from app import create_app


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    """Push an app context so email templates can render."""
    with app.app_context():
        yield


@pytest.fixture
def mail_settings(app):
    return app.extensions["mail_settings"]


@pytest.fixture
def valid_payload():
    return {
        "name": "Jo",
        "email": "jo@example.com",
        "message": "Hello there, interested",
    }


@pytest.fixture
def fake_mailtrap():
    """A client factory whose client answers send() with ids a1, then b1.

    The factory is a MagicMock, so tests can assert it was (or was not)
    called; ``fake_mailtrap.client`` is the client it builds.
    """
    client = MagicMock(name="MailtrapClient()")
    client.send.side_effect = [
        {"success": True, "message_ids": ["a1"]},
        {"success": True, "message_ids": ["b1"]},
    ]
    factory = MagicMock(name="MailtrapClient", return_value=client)
    factory.client = client
    return factory
