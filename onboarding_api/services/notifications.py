"""Activation-link delivery to the business owner.

Delivery is organised as ordered chains of channels. Inside a chain the next
channel only runs when the previous one failed (WhatsApp, then SMS); every
chain runs independently of the others (email). Nothing here raises: each
channel's result ends up in the returned NotificationReport.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from onboarding_api.core.config import settings
from onboarding_api.schemas.onboarding import OnboardingRecord
from onboarding_api.services import messaging
from onboarding_api.services.email_service import email_service

logger = logging.getLogger(__name__)

Sender = Callable[[OnboardingRecord, str, str], Awaitable[bool]]


@dataclass
class ChannelOutcome:
    channel: str
    delivered: bool
    detail: str = ""


@dataclass
class NotificationReport:
    activation_link: str
    outcomes: list[ChannelOutcome] = field(default_factory=list)

    @property
    def delivered(self) -> list[str]:
        return [o.channel for o in self.outcomes if o.delivered]

    def outcome(self, channel: str) -> Optional[ChannelOutcome]:
        return next((o for o in self.outcomes if o.channel == channel), None)

    def to_dict(self) -> dict:
        return {o.channel: o.detail for o in self.outcomes}


@dataclass
class Channel:
    name: str
    send: Sender


def build_activation_link(token: str) -> str:
    return f"{settings.base_url}/connect?token={token}"


def build_activation_message(record: OnboardingRecord, link: str) -> str:
    owner = record.payload.get("owner_name") or "there"
    business = record.payload.get("name") or "your business"
    return (
        f"Hi {owner}! Thanks for registering {business} with Global Call Partners. "
        f"To finish, connect your WhatsApp Business Account here: {link}"
    )


async def _send_whatsapp(record: OnboardingRecord, message: str, link: str) -> bool:
    return await messaging.send_whatsapp_message(record.payload.get("owner_phone", ""), message)


async def _send_sms(record: OnboardingRecord, message: str, link: str) -> bool:
    return await messaging.send_sms_message(record.payload.get("owner_phone", ""), message)


async def _send_email(record: OnboardingRecord, message: str, link: str) -> bool:
    return await email_service.send_activation_email(
        owner_email=record.payload.get("owner_email", ""),
        owner_name=record.payload.get("owner_name", ""),
        business_name=record.payload.get("name", ""),
        activation_link=link,
    )


DEFAULT_CHAINS: list[list[Channel]] = [
    [Channel("whatsapp", _send_whatsapp), Channel("sms", _send_sms)],
    [Channel("email", _send_email)],
]


class NotificationDispatcher:
    def __init__(self, chains: Optional[list[list[Channel]]] = None):
        self.chains = chains if chains is not None else DEFAULT_CHAINS

    async def notify(self, record: OnboardingRecord) -> NotificationReport:
        link = build_activation_link(record.token)
        message = build_activation_message(record, link)
        report = NotificationReport(activation_link=link)

        for chain in self.chains:
            delivered = False
            for channel in chain:
                if delivered:
                    report.outcomes.append(ChannelOutcome(channel.name, False, "skipped"))
                    continue
                delivered = await self._attempt(channel, record, message, link)
                report.outcomes.append(
                    ChannelOutcome(channel.name, delivered, "sent" if delivered else "failed")
                )

        logger.info(
            "Notifications for token %s: %s",
            record.token,
            ", ".join(f"{o.channel}={o.detail}" for o in report.outcomes) or "none",
        )
        return report

    async def _attempt(self, channel: Channel, record: OnboardingRecord, message: str, link: str) -> bool:
        try:
            return bool(await channel.send(record, message, link))
        except Exception as e:
            logger.error("%s delivery failed for token %s: %s", channel.name, record.token, e)
            return False


notification_dispatcher = NotificationDispatcher()
