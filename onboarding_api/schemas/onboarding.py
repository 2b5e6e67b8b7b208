"""Pydantic schemas for onboarding submissions and stored records."""

import enum
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_token() -> str:
    """128 random bits, hex encoded."""
    return secrets.token_hex(16)


class OnboardingStatus(str, enum.Enum):
    PENDING = "pending"
    CONNECTED = "connected"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    def can_transition_to(self, target: "OnboardingStatus") -> bool:
        """Status only moves forward; staying put is allowed."""
        return target.rank >= self.rank


_STATUS_ORDER = [
    OnboardingStatus.PENDING,
    OnboardingStatus.CONNECTED,
    OnboardingStatus.COMPLETED,
]


class OnboardingSubmission(BaseModel):
    """Fields posted by the onboarding form.

    Everything is optional here so that missing values reach the required-field
    check and come back as a 400 with a readable message.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    target_country: Optional[str] = None
    base_agent: Optional[str] = None
    street: Optional[str] = None
    timezone: Optional[str] = None
    area_code: Optional[str] = None
    business_niche: Optional[str] = None
    service_area: Optional[str] = None
    business_hours: Optional[str] = None
    services_offered: Optional[str] = None
    services_not_offered: Optional[str] = None
    # WhatsApp/SMS consent ticked on the form; forwarded to n8n with the rest
    opt_in_consent: Optional[bool] = None


class OnboardingRecord(BaseModel):
    """One submission carried through the OAuth hand-off."""
    model_config = ConfigDict(populate_by_name=True)

    token: str
    slug: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    status: OnboardingStatus = OnboardingStatus.PENDING
    facebook_access_token: Optional[str] = Field(None, alias="facebookAccessToken")
    facebook_user_data: Optional[Dict[str, Any]] = Field(None, alias="facebookUserData")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @property
    def owner_email(self) -> Optional[str]:
        return self.payload.get("owner_email")

    def to_public(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CompleteRequest(BaseModel):
    token: str = Field(..., min_length=1)
