"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from onboarding_api.core.config import settings
from onboarding_api.core.errors import NotFound
from onboarding_api.services.notifications import NotificationDispatcher, notification_dispatcher
from onboarding_api.services.store import OnboardingRepository


def get_store(request: Request) -> OnboardingRepository:
    """The store created with the application (see main.py)."""
    return request.app.state.store


def get_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher


def require_debug_routes() -> None:
    if not settings.DEBUG_ROUTES_ENABLED:
        raise NotFound("Route not found")
