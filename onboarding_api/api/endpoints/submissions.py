"""Onboarding form submission and completion endpoints."""

import logging

from fastapi import APIRouter, Depends

from onboarding_api.core.config import settings
from onboarding_api.core.deps import get_dispatcher, get_store
from onboarding_api.core.errors import Conflict, NotFound, UpstreamError, ValidationFailed
from onboarding_api.core.slug import slugify
from onboarding_api.core.validators import is_valid_e164, missing_required_fields
from onboarding_api.schemas.onboarding import (
    CompleteRequest,
    OnboardingRecord,
    OnboardingStatus,
    OnboardingSubmission,
    new_token,
    utcnow,
)
from onboarding_api.services import supabase
from onboarding_api.services.notifications import NotificationDispatcher, build_activation_link
from onboarding_api.services.store import OnboardingRepository
from onboarding_api.services.webhook import (
    WebhookForwardError,
    WebhookNotConfigured,
    forward_submission,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def _resolve_agent(base_agent: str) -> tuple[str, str]:
    """Map the selected agent to its (id_millis, name); keep the raw id on failure."""
    try:
        agent = await supabase.get_agent_by_id(base_agent)
    except Exception as e:
        logger.warning("Agent lookup failed for %s, using submitted id: %s", base_agent, e)
        return base_agent, ""
    if not agent:
        return base_agent, ""
    return agent.get("id_millis") or base_agent, agent.get("name") or ""


def _raise_duplicate(existing: OnboardingRecord, email: str, slug: str) -> None:
    logger.info("Duplicate submission for %s / %s, existing token %s", email, slug, existing.token)
    raise Conflict(
        "A registration with this email or business name already exists",
        extra={"token": existing.token, "integrateLink": build_activation_link(existing.token)},
    )


async def _forward(payload: dict, abort_on_failure: bool) -> None:
    try:
        await forward_submission(payload)
    except (WebhookNotConfigured, WebhookForwardError) as e:
        if abort_on_failure:
            logger.error("Webhook forward failed for %s, nothing stored: %s", payload["token"], e)
            raise UpstreamError("Error sending data for processing", details=str(e))
        logger.warning("Webhook forward failed for %s, continuing: %s", payload["token"], e)


@router.post("/submit")
async def submit_onboarding(
    data: OnboardingSubmission,
    store: OnboardingRepository = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Validate, store, forward and notify.

    Duplicate owner email or business slug answers 409 with the token of the
    existing record so the form can show its activation link again.
    """
    fields = data.model_dump()

    missing = missing_required_fields(fields, profile=settings.REQUIRE_BUSINESS_PROFILE)
    if missing:
        raise ValidationFailed(
            "Missing required fields",
            details=f"{', '.join(missing)} are required",
        )

    if not is_valid_e164(fields["owner_phone"]):
        raise ValidationFailed(
            "Invalid phone number",
            details="The phone number must be in E.164 format (e.g. +5511999999999)",
        )

    slug = slugify(fields["name"])
    if not slug:
        raise ValidationFailed(
            "Invalid business name",
            details="The business name must contain at least one letter or digit",
        )

    agent_id, agent_name = await _resolve_agent(fields["base_agent"])

    token = new_token()
    created_at = utcnow()
    payload = {
        **fields,
        "base_agent": agent_id,
        "base_agent_name": agent_name,
        "token": token,
        "slug": slug,
        "created_at": created_at.isoformat(),
    }
    abort_on_failure = settings.WEBHOOK_FAILURE_MODE == "abort"

    if abort_on_failure:
        # Nothing is stored until n8n accepted the payload, so a 409 never
        # hands out a token that a failed forward would later remove.
        existing = store.find_by_email_or_slug(fields["owner_email"], slug)
        if existing is not None:
            _raise_duplicate(existing, fields["owner_email"], slug)
        await _forward(payload, abort_on_failure)

    record, created = store.insert_if_absent(
        OnboardingRecord(token=token, slug=slug, payload=payload, created_at=created_at)
    )
    if not created:
        _raise_duplicate(record, fields["owner_email"], slug)

    if not abort_on_failure:
        await _forward(payload, abort_on_failure)

    report = await dispatcher.notify(record)

    logger.info("Onboarding submitted: %s (token=%s)", fields["name"], token)
    return {
        "success": True,
        "message": "Registration received. Check WhatsApp or email for your activation link.",
        "token": token,
        "integrateLink": report.activation_link,
        "notifications": report.to_dict(),
    }


@router.post("/complete")
async def complete_onboarding(
    data: CompleteRequest,
    store: OnboardingRepository = Depends(get_store),
):
    """Mark a connected record as completed once downstream provisioning is done."""
    record = store.get(data.token)
    if record is None:
        raise NotFound("Token not found")
    if record.status != OnboardingStatus.CONNECTED:
        raise Conflict(
            "Only connected registrations can be completed",
            details=f"current status is {record.status.value}",
        )

    updated = store.update(data.token, status=OnboardingStatus.COMPLETED)
    logger.info("Onboarding completed for token %s", data.token)
    return {"success": True, "token": data.token, "status": updated.status.value}
