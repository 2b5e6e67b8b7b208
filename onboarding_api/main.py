import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from onboarding_api.api.router import api_router, debug_router, oauth_router
from onboarding_api.core.config import log_integration_status, settings
from onboarding_api.core.errors import OnboardingAPIError
from onboarding_api.services.store import InMemoryOnboardingStore

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s — %(name)s — %(levelname)s — %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    log_integration_status(settings)
    logger.info("Onboarding API listening on port %s (%s)", settings.PORT, settings.APP_ENV)
    yield


app = FastAPI(
    title="Global Call Partners Onboarding API",
    description="Lead intake and WhatsApp Business onboarding — FastAPI + Twilio + Facebook OAuth",
    version="0.1.0",
    lifespan=lifespan,
)

# Process-lifetime store; routes reach it through core.deps.get_store
app.state.store = InMemoryOnboardingStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")
app.include_router(oauth_router, tags=["oauth"])
app.include_router(debug_router, prefix="/debug", tags=["debug"])


@app.exception_handler(OnboardingAPIError)
async def onboarding_error_handler(request: Request, exc: OnboardingAPIError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request body", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "details": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("onboarding_api.main:app", host="0.0.0.0", port=settings.PORT)
