import os
from dataclasses import dataclass


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    SECRET_KEY = os.environ.get("SECRET_KEY")

    SITE_URL = os.environ.get("SITE_URL", "https://melius-ajnahal.com")
    SITE_NAME = "MELIUS"

    # --- Email (Mailtrap Sending API) ---
    MAILTRAP_TOKEN = os.environ.get("MAILTRAP_TOKEN")  # Sending API token, not Testing
    MAILTRAP_SENDER_EMAIL = os.environ.get(
        "MAILTRAP_SENDER_EMAIL", "hello@melius-ajnahal.com"
    )
    MAILTRAP_RECIPIENT_EMAIL = os.environ.get(
        "MAILTRAP_RECIPIENT_EMAIL", "melius.ajnahal@gmail.com"
    )
    MAILTRAP_BCC_EMAIL = os.environ.get("MAILTRAP_BCC_EMAIL")  # optional observer copy
    MAILTRAP_API_URL = os.environ.get(
        "MAILTRAP_API_URL", "https://send.api.mailtrap.io/api/send"
    )
    MAILTRAP_TIMEOUT = int(os.environ.get("MAILTRAP_TIMEOUT", 30))

    MAIL_FROM_NAME = os.environ.get("MAIL_FROM_NAME", "Melius Contact Form")
    MAIL_ACK_FROM_NAME = os.environ.get("MAIL_ACK_FROM_NAME", "Melius - Mayura Kataria")
    MAIL_SIGNATURE = os.environ.get("MAIL_SIGNATURE", "Mayura Kataria")

    # --- Rate limiting ---
    CONTACT_RATE_LIMIT = os.environ.get("CONTACT_RATE_LIMIT", "5 per hour")

    # --- Session / cookies ---
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # --- WTF / CSRF ---
    WTF_CSRF_ENABLED = True

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = [
            "SECRET_KEY",
            "MAILTRAP_TOKEN",
        ]
        missing = [v for v in required if not os.environ.get(v)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


class DevConfig(Config):
    """Local development."""

    DEBUG = True
    SECRET_KEY = Config.SECRET_KEY or "dev-secret-key-not-for-production"
    SESSION_COOKIE_SECURE = False


class TestConfig(Config):
    """Testing — CSRF and rate limiting disabled, fake Mailtrap token."""

    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-not-for-production"
    SITE_URL = "https://melius.test"
    MAILTRAP_TOKEN = "mt_test_token_1234567890abcdef"
    MAILTRAP_SENDER_EMAIL = "hello@melius.test"
    MAILTRAP_RECIPIENT_EMAIL = "owner@melius.test"
    MAILTRAP_BCC_EMAIL = None
    MAILTRAP_API_URL = "https://send.api.mailtrap.test/api/send"
    MAILTRAP_TIMEOUT = 5
    WTF_CSRF_ENABLED = False  # disable CSRF for test requests
    RATELIMIT_ENABLED = False  # disable rate limiting in tests
    SESSION_COOKIE_SECURE = False
    SERVER_NAME = "localhost"

    @staticmethod
    def validate():
        """Skip validation in test mode; everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production."""

    DEBUG = False
    SESSION_COOKIE_SECURE = True


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}


@dataclass(frozen=True)
class MailSettings:
    """Email settings resolved once at startup and handed to the contact handler."""

    token: str | None
    sender_email: str
    recipient_email: str
    bcc_email: str | None = None
    sender_name: str = "Melius Contact Form"
    acknowledgment_sender_name: str = "Melius - Mayura Kataria"
    signature_name: str = "Mayura Kataria"
    api_url: str = "https://send.api.mailtrap.io/api/send"
    timeout: int = 30

    @classmethod
    def from_config(cls, config) -> "MailSettings":
        """Build settings from a Flask config mapping."""
        return cls(
            token=config.get("MAILTRAP_TOKEN") or None,
            sender_email=config["MAILTRAP_SENDER_EMAIL"],
            recipient_email=config["MAILTRAP_RECIPIENT_EMAIL"],
            bcc_email=config.get("MAILTRAP_BCC_EMAIL") or None,
            sender_name=config.get("MAIL_FROM_NAME", cls.sender_name),
            acknowledgment_sender_name=config.get(
                "MAIL_ACK_FROM_NAME", cls.acknowledgment_sender_name
            ),
            signature_name=config.get("MAIL_SIGNATURE", cls.signature_name),
            api_url=config.get("MAILTRAP_API_URL", cls.api_url),
            timeout=int(config.get("MAILTRAP_TIMEOUT", cls.timeout)),
        )

    @property
    def token_preview(self) -> str:
        """Masked token for logs: first 8 and last 4 characters only."""
        if not self.token:
            return "N/A"
        if len(self.token) <= 16:
            return "*" * len(self.token)
        return f"{self.token[:8]}...{self.token[-4:]}"
