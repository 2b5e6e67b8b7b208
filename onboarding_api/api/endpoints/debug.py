"""Development helpers for inspecting and resetting the onboarding store.

Disabled with DEBUG_ROUTES_ENABLED=false.
"""

import logging

from fastapi import APIRouter, Depends

from onboarding_api.core.deps import get_store, require_debug_routes
from onboarding_api.core.errors import NotFound
from onboarding_api.services.store import OnboardingRepository

router = APIRouter(dependencies=[Depends(require_debug_routes)])
logger = logging.getLogger(__name__)


@router.get("/token/{token}")
async def get_token(token: str, store: OnboardingRepository = Depends(get_store)):
    record = store.get(token)
    if record is None:
        raise NotFound("Token not found")
    return record.to_public()


@router.delete("/clear")
async def clear_store(store: OnboardingRepository = Depends(get_store)):
    removed = store.clear()
    logger.warning("Debug clear removed %d onboarding records", removed)
    return {"success": True, "removed": removed}
