"""Facebook OAuth hand-off for linking a WhatsApp Business Account.

These routes are opened in the owner's browser, so errors are answered as
plain text rather than JSON.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from onboarding_api.core.config import settings
from onboarding_api.core.deps import get_store
from onboarding_api.schemas.onboarding import OnboardingStatus
from onboarding_api.services import facebook_oauth
from onboarding_api.services.facebook_oauth import FacebookOAuthError
from onboarding_api.services.store import InvalidStatusTransition, OnboardingRepository

router = APIRouter()
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates"


def load_template(filename: str) -> str:
    template_path = TEMPLATES_DIR / filename
    if template_path.exists():
        return template_path.read_text()
    logger.error("Template not found at %s", template_path)
    return f"<html><body><h1>Template not found: {filename}</h1></body></html>"


@router.get("/connect")
async def connect(token: Optional[str] = None, store: OnboardingRepository = Depends(get_store)):
    """Send the owner to the Facebook dialog with the onboarding token as state."""
    if not token:
        return PlainTextResponse("Missing token", status_code=400)

    if store.get(token) is None:
        return PlainTextResponse("Invalid or expired token", status_code=404)

    try:
        url = facebook_oauth.build_authorize_url(state=token)
    except FacebookOAuthError as e:
        logger.error("Cannot start Facebook OAuth: %s", e)
        return PlainTextResponse("Facebook integration is not configured", status_code=500)

    return RedirectResponse(url=url, status_code=302)


@router.get("/auth/callback")
async def auth_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    store: OnboardingRepository = Depends(get_store),
):
    """Exchange the code, fetch the profile, then mark the record connected."""
    if error:
        logger.info("Facebook authorization denied for %s: %s", state, error)
        return PlainTextResponse(f"Authorization denied: {error_description or error}", status_code=400)

    if not code or not state:
        return PlainTextResponse("Missing code or state", status_code=400)

    record = store.get(state)
    if record is None:
        return PlainTextResponse("Invalid or expired token", status_code=404)
    if record.status == OnboardingStatus.COMPLETED:
        return PlainTextResponse("This registration is already completed", status_code=409)

    try:
        access_token = await facebook_oauth.exchange_code(code)
        user_data = await facebook_oauth.fetch_profile(access_token)
    except FacebookOAuthError as e:
        logger.error("Facebook OAuth failed for token %s: %s", state, e)
        return PlainTextResponse("Failed to connect Facebook account", status_code=500)

    try:
        store.update(
            state,
            facebook_access_token=access_token,
            facebook_user_data=user_data,
            status=OnboardingStatus.CONNECTED,
        )
    except InvalidStatusTransition:
        return PlainTextResponse("This registration is already completed", status_code=409)

    logger.info("Facebook account %s linked to token %s", user_data.get("id"), state)
    return RedirectResponse(url=settings.OAUTH_SUCCESS_URL, status_code=302)


@router.get("/connected", response_class=HTMLResponse)
async def connected_page():
    """Static page shown after a successful link."""
    return load_template("connected.html")
