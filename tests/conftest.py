"""Shared test fixtures for the onboarding API tests.

Every integration credential is blanked so no test reaches Twilio, SendGrid,
Supabase, Facebook or n8n unless it patches the call explicitly.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from onboarding_api.core.config import settings
from onboarding_api.core.deps import get_store
from onboarding_api.main import app
from onboarding_api.services.email_service import email_service
from onboarding_api.services.store import InMemoryOnboardingStore

TEST_SETTINGS = {
    "PUBLIC_BASE_URL": "http://test",
    "N8N_WEBHOOK_URL": "",
    "WEBHOOK_FAILURE_MODE": "ignore",
    "REQUIRE_BUSINESS_PROFILE": False,
    "DEBUG_ROUTES_ENABLED": True,
    "SUPABASE_URL": "",
    "SUPABASE_ANON_KEY": "",
    "TWILIO_ACCOUNT_SID": "",
    "TWILIO_AUTH_TOKEN": "",
    "TWILIO_WHATSAPP_SENDER": "",
    "TWILIO_SMS_SENDER": "",
    "SENDGRID_API_KEY": "",
    "SMTP_HOST": "",
    "SMTP_USER": "",
    "SMTP_PASS": "",
    "FACEBOOK_APP_ID": "1234567890",
    "FACEBOOK_APP_SECRET": "app-secret",
    "FACEBOOK_REDIRECT_URI": "http://test/auth/callback",
    "OAUTH_SUCCESS_URL": "/connected",
}


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    for name, value in TEST_SETTINGS.items():
        monkeypatch.setattr(settings, name, value)
    monkeypatch.setattr(email_service, "transport", None)
    return settings


@pytest.fixture
def store():
    """Fresh store per test."""
    return InMemoryOnboardingStore()


@pytest_asyncio.fixture
async def client(store):
    """Async HTTP test client wired to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def submission():
    return {
        "name": "Café & Açaí Ltda",
        "owner_name": "Maria Souza",
        "owner_phone": "+15551234567",
        "owner_email": "maria@example.com",
        "target_country": "US",
        "base_agent": "agent-1",
        "timezone": "America/New_York",
        "street": "123 Main St",
        "area_code": "555",
        "business_niche": "Food",
        "service_area": "Miami",
        "business_hours": "Mon-Fri 9-18",
        "services_offered": "Açaí bowls",
        "services_not_offered": "Delivery",
    }
