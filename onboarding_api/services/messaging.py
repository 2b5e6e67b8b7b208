"""Twilio WhatsApp and SMS delivery.

Both senders return True on success. Missing credentials and Twilio errors
are logged and reported as False so callers can fall back to another channel.
The Twilio SDK call is blocking and runs in the threadpool.
"""

import logging
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from starlette.concurrency import run_in_threadpool
from onboarding_api.core.config import settings

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def _get_twilio_client() -> Client:
    return Client(
        settings.TWILIO_ACCOUNT_SID,
        settings.TWILIO_AUTH_TOKEN,
        http_client=TwilioHttpClient(timeout=settings.HTTP_TIMEOUT_SECONDS),
    )


def _twilio_configured() -> bool:
    return bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN)


def to_whatsapp_address(phone: str) -> str:
    return phone if phone.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{phone}"


def to_sms_address(phone: str) -> str:
    return phone.replace(WHATSAPP_PREFIX, "")


async def send_whatsapp_message(to: str, body: str) -> bool:
    """Send a WhatsApp message through the configured Twilio sender."""
    if not _twilio_configured() or not settings.TWILIO_WHATSAPP_SENDER:
        logger.warning("Twilio WhatsApp sender not configured — skipping WhatsApp to %s", to)
        return False
    return await run_in_threadpool(
        _send_message,
        channel="WhatsApp",
        from_=to_whatsapp_address(settings.TWILIO_WHATSAPP_SENDER),
        to=to_whatsapp_address(to),
        body=body,
    )


async def send_sms_message(to: str, body: str) -> bool:
    """Send a plain SMS, stripping any whatsapp: prefix from the recipient."""
    if not _twilio_configured() or not settings.TWILIO_SMS_SENDER:
        logger.warning("Twilio SMS sender not configured — skipping SMS to %s", to)
        return False
    return await run_in_threadpool(
        _send_message,
        channel="SMS",
        from_=settings.TWILIO_SMS_SENDER,
        to=to_sms_address(to),
        body=body,
    )


def _send_message(channel: str, from_: str, to: str, body: str) -> bool:
    try:
        client = _get_twilio_client()
        message = client.messages.create(body=body, from_=from_, to=to)
        logger.info("%s sent to %s — SID: %s", channel, to, message.sid)
        return True
    except TwilioRestException as e:
        logger.error("Twilio error sending %s to %s: %s", channel, to, e)
        return False
    except Exception as e:
        logger.error("Unexpected error sending %s to %s: %s", channel, to, e)
        return False
