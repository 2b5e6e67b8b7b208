from fastapi import APIRouter
from onboarding_api.api.endpoints import agents, debug, oauth, status, submissions

api_router = APIRouter()
api_router.include_router(agents.router, tags=["agents"])
api_router.include_router(submissions.router, tags=["onboarding"])
api_router.include_router(status.router, tags=["status"])

oauth_router = oauth.router
debug_router = debug.router
