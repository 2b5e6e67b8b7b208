from fastapi import APIRouter, Depends

from onboarding_api.core.config import settings
from onboarding_api.core.deps import get_store
from onboarding_api.schemas.onboarding import utcnow
from onboarding_api.services.store import OnboardingRepository

router = APIRouter()


@router.get("/status")
async def status(store: OnboardingRepository = Depends(get_store)):
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "webhook_configured": settings.webhook_configured,
        "webhook_failure_mode": settings.WEBHOOK_FAILURE_MODE,
        "records": len(store.get_all()),
    }
