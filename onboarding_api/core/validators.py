"""Submission checks. Every function answers with a boolean (or the list of
offending keys); building user-facing messages is the caller's job."""

import re
from typing import Any, Mapping

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

REQUIRED_FIELDS = (
    "name",
    "owner_name",
    "owner_phone",
    "owner_email",
    "target_country",
    "base_agent",
    "timezone",
)

PROFILE_REQUIRED_FIELDS = REQUIRED_FIELDS + (
    "business_niche",
    "service_area",
    "business_hours",
    "services_offered",
    "services_not_offered",
)


def is_valid_e164(phone: Any) -> bool:
    """`+`, a non-zero leading digit, then 1-14 more digits."""
    if not isinstance(phone, str):
        return False
    # fullmatch so a trailing newline is not accepted by `$`
    return E164_PATTERN.fullmatch(phone) is not None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_required_fields(submission: Mapping[str, Any], profile: bool = False) -> list[str]:
    fields = PROFILE_REQUIRED_FIELDS if profile else REQUIRED_FIELDS
    return [key for key in fields if _is_blank(submission.get(key))]


def has_required_fields(submission: Mapping[str, Any], profile: bool = False) -> bool:
    return not missing_required_fields(submission, profile)
