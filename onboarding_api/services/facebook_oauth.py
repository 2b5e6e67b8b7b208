"""Facebook Login for linking a WhatsApp Business Account.

Two Graph API calls make up the callback: code -> access token, then
token -> basic profile. Neither is retried.
"""

import logging
import urllib.parse
from typing import Any, Dict

import httpx

from onboarding_api.core.config import settings

logger = logging.getLogger(__name__)

PROFILE_FIELDS = "id,name,email"


class FacebookOAuthError(Exception):
    pass


def _require_app_config() -> None:
    if not (settings.FACEBOOK_APP_ID and settings.FACEBOOK_APP_SECRET and settings.FACEBOOK_REDIRECT_URI):
        raise FacebookOAuthError("FACEBOOK_APP_ID, FACEBOOK_APP_SECRET or FACEBOOK_REDIRECT_URI not configured")


def _dialog_url() -> str:
    return f"https://www.facebook.com/{settings.FACEBOOK_GRAPH_VERSION}/dialog/oauth"


def _graph_url(path: str) -> str:
    return f"https://graph.facebook.com/{settings.FACEBOOK_GRAPH_VERSION}/{path}"


def build_authorize_url(state: str) -> str:
    _require_app_config()
    params = {
        "client_id": settings.FACEBOOK_APP_ID,
        "redirect_uri": settings.FACEBOOK_REDIRECT_URI,
        "state": state,
        "scope": ",".join(settings.facebook_scopes),
        "response_type": "code",
    }
    return f"{_dialog_url()}?{urllib.parse.urlencode(params)}"


async def exchange_code(code: str) -> str:
    """Trade an authorization code for a user access token."""
    _require_app_config()
    params = {
        "client_id": settings.FACEBOOK_APP_ID,
        "client_secret": settings.FACEBOOK_APP_SECRET,
        "redirect_uri": settings.FACEBOOK_REDIRECT_URI,
        "code": code,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.get(_graph_url("oauth/access_token"), params=params)
    except httpx.HTTPError as exc:
        raise FacebookOAuthError(f"token exchange failed: {exc}") from exc

    if response.status_code != 200:
        raise FacebookOAuthError(f"token exchange failed: {response.status_code} {response.text[:200]}")

    access_token = response.json().get("access_token")
    if not access_token:
        raise FacebookOAuthError("token exchange returned no access_token")
    return access_token


async def fetch_profile(access_token: str) -> Dict[str, Any]:
    params = {"fields": PROFILE_FIELDS, "access_token": access_token}
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.get(_graph_url("me"), params=params)
    except httpx.HTTPError as exc:
        raise FacebookOAuthError(f"profile fetch failed: {exc}") from exc

    if response.status_code != 200:
        raise FacebookOAuthError(f"profile fetch failed: {response.status_code} {response.text[:200]}")
    return response.json()
