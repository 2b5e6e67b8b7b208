"""Error types surfaced to API callers as `{success: false, message, details}`."""

from typing import Any, Optional


class OnboardingAPIError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[str] = None,
        extra: Optional[dict[str, Any]] = None,
    ):
        self.message = message or self.message
        self.details = details
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationFailed(OnboardingAPIError):
    status_code = 400
    message = "Invalid request"


class NotFound(OnboardingAPIError):
    status_code = 404
    message = "Not found"


class Conflict(OnboardingAPIError):
    status_code = 409
    message = "Conflict"


class UpstreamError(OnboardingAPIError):
    """A third-party integration is missing credentials or failed."""
    status_code = 500
    message = "Upstream integration failed"
