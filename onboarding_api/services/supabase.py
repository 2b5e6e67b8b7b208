"""Read-only access to the `ai_agents` table through the Supabase REST API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from onboarding_api.core.config import settings

logger = logging.getLogger(__name__)

AGENT_FIELDS = "id,name,description,id_millis,created_at"


class SupabaseNotConfigured(Exception):
    pass


def _headers() -> Dict[str, str]:
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise SupabaseNotConfigured("SUPABASE_URL or SUPABASE_ANON_KEY not configured")
    return {
        "apikey": settings.SUPABASE_ANON_KEY,
        "Authorization": f"Bearer {settings.SUPABASE_ANON_KEY}",
        "Content-Type": "application/json",
    }


async def _query_agents(params: Dict[str, str]) -> List[Dict[str, Any]]:
    headers = _headers()
    url = f"{settings.SUPABASE_URL.rstrip('/')}/rest/v1/ai_agents"
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        response = await client.get(url, headers=headers, params=params)
    response.raise_for_status()
    return response.json()


async def get_agents() -> List[Dict[str, Any]]:
    """All agents available for selection in the onboarding form."""
    return await _query_agents({"select": AGENT_FIELDS})


async def get_agent_by_id(agent_id: str) -> Optional[Dict[str, Any]]:
    rows = await _query_agents({"id": f"eq.{agent_id}", "select": "id,name,description,id_millis"})
    return rows[0] if rows else None
