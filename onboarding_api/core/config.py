"""
Application configuration.
Values come from environment variables, falling back to a local .env file so
development works without exporting anything. Every integration is optional:
a missing credential only disables that integration.
"""
import logging
from typing import Literal

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_FACEBOOK_SCOPES = (
    "whatsapp_business_management,"
    "whatsapp_business_messaging,"
    "business_management"
)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"
    PUBLIC_BASE_URL: str = "http://localhost:3001"
    CORS_ORIGINS: str = "*"
    DEBUG_ROUTES_ENABLED: bool = True

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # n8n automation webhook
    N8N_WEBHOOK_URL: str = ""
    N8N_TIMEOUT_SECONDS: float = 10.0
    WEBHOOK_FAILURE_MODE: Literal["ignore", "abort"] = "ignore"

    # Also require the business-profile fields (niche, area, hours, services)
    REQUIRE_BUSINESS_PROFILE: bool = False

    # Supabase agent directory
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    # Twilio WhatsApp / SMS
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_WHATSAPP_SENDER: str = ""
    TWILIO_SMS_SENDER: str = ""

    # Email: SendGrid when an API key is present, SMTP otherwise
    SENDGRID_API_KEY: str = ""
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    EMAIL_FROM_ADDRESS: str = ""
    EMAIL_FROM_NAME: str = "Global Call Partners"

    # Facebook OAuth (WhatsApp Business Account linking)
    FACEBOOK_APP_ID: str = ""
    FACEBOOK_APP_SECRET: str = ""
    FACEBOOK_REDIRECT_URI: str = ""
    FACEBOOK_GRAPH_VERSION: str = "v18.0"
    FACEBOOK_SCOPES: str = DEFAULT_FACEBOOK_SCOPES
    OAUTH_SUCCESS_URL: str = "/connected"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def base_url(self) -> str:
        return self.PUBLIC_BASE_URL.rstrip("/")

    @property
    def webhook_configured(self) -> bool:
        return bool(self.N8N_WEBHOOK_URL)

    @property
    def facebook_scopes(self) -> list[str]:
        return [s.strip() for s in self.FACEBOOK_SCOPES.split(",") if s.strip()]


settings = Settings()


def log_integration_status(cfg: Settings = settings) -> None:
    """Warn once at startup about every integration that lacks credentials."""
    if not cfg.N8N_WEBHOOK_URL:
        logger.warning("N8N_WEBHOOK_URL not configured — submissions will not be forwarded")
    if not (cfg.SUPABASE_URL and cfg.SUPABASE_ANON_KEY):
        logger.warning("Supabase credentials not configured — agent lookups will fail")
    if not (cfg.TWILIO_ACCOUNT_SID and cfg.TWILIO_AUTH_TOKEN):
        logger.warning("Twilio credentials not configured — WhatsApp/SMS will not be sent")
    if not cfg.SENDGRID_API_KEY and not (cfg.SMTP_HOST and cfg.SMTP_USER and cfg.SMTP_PASS):
        logger.warning(
            "No email transport configured (SMTP_HOST: %s, SMTP_USER: %s, SMTP_PASS: %s)",
            cfg.SMTP_HOST or "missing",
            cfg.SMTP_USER or "missing",
            "present" if cfg.SMTP_PASS else "missing",
        )
    if not (cfg.FACEBOOK_APP_ID and cfg.FACEBOOK_APP_SECRET and cfg.FACEBOOK_REDIRECT_URI):
        logger.warning("Facebook app not configured — /connect will fail")
    logger.info("Webhook failure mode: %s", cfg.WEBHOOK_FAILURE_MODE)
