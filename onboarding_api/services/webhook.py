"""Forward submissions to the n8n automation webhook."""

import logging
from typing import Any, Dict

import httpx

from onboarding_api.core.config import settings

logger = logging.getLogger(__name__)


class WebhookNotConfigured(Exception):
    pass


class WebhookForwardError(Exception):
    pass


async def forward_submission(payload: Dict[str, Any]) -> None:
    """POST the payload to N8N_WEBHOOK_URL. Raises on any failure."""
    url = settings.N8N_WEBHOOK_URL
    if not url:
        raise WebhookNotConfigured("N8N_WEBHOOK_URL is not set")

    try:
        async with httpx.AsyncClient(timeout=settings.N8N_TIMEOUT_SECONDS) as client:
            response = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise WebhookForwardError(f"could not reach webhook: {exc}") from exc

    if response.status_code >= 400:
        raise WebhookForwardError(f"webhook answered {response.status_code}: {response.text[:200]}")

    logger.info("Submission %s forwarded to n8n (%s)", payload.get("token"), response.status_code)
