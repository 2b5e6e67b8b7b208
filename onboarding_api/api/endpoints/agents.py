import logging

from fastapi import APIRouter

from onboarding_api.core.errors import UpstreamError
from onboarding_api.services import supabase

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/agents")
async def list_agents():
    """Agents the owner can pick in the form, straight from Supabase."""
    try:
        agents = await supabase.get_agents()
    except Exception as e:
        logger.error("Error fetching agents: %s", e)
        raise UpstreamError("Error fetching agents", details=str(e))
    return {"success": True, "agents": agents}
