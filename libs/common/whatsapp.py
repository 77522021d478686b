"""Outbound WhatsApp messages through an HTTP provider."""

import httpx

from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 10.0


def whatsapp_configured() -> bool:
    settings = get_settings()
    return bool(settings.WHATSAPP_API_URL)


async def send_whatsapp_message(
    phone: str, message: str, timeout: float = _DEFAULT_TIMEOUT
) -> bool:
    """
    POST {"to", "message"} to WHATSAPP_API_URL.

    Returns True on a 2xx response. Without a configured provider the message is
    only logged.
    """
    settings = get_settings()

    if not whatsapp_configured():
        logger.info(f"Would have sent WhatsApp message to {phone}: {message}")
        return False

    headers = {}
    if settings.WHATSAPP_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.WHATSAPP_API_TOKEN}"
    request_id = get_request_id()
    if request_id:
        headers["X-Request-ID"] = request_id

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                settings.WHATSAPP_API_URL,
                headers=headers,
                json={"to": phone, "message": message},
            )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"WhatsApp send to {phone} failed: {type(e).__name__}: {e}")
        return False

    logger.info(f"WhatsApp message sent to {phone}")
    return True
