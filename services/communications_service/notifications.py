"""Outbound notifications to parents and coaches.

Messages go out by email and, where a phone number is known, WhatsApp.
Provider failures are logged and never propagate to the request that
triggered them.
"""

import asyncio
from typing import Awaitable, List, Optional

from libs.common.emails import send_email
from libs.common.logging import get_logger
from libs.common.whatsapp import send_whatsapp_message

logger = get_logger(__name__)

FREE_SESSION_SUBJECT = "Free Session Confirmation"
SESSION_UPDATE_SUBJECT = "Session Update"
INVOICE_UPDATE_SUBJECT = "Invoice Update"


def free_session_message(parent_name: str, kid_name: str) -> str:
    return (
        f"Hello {parent_name}, your free session request for {kid_name} "
        "has been confirmed!"
    )


def session_change_message(changes: str) -> str:
    return f"Your session has been updated: {changes}"


def invoice_update_message(status: str) -> str:
    return f"Your invoice status has been updated to: {status}"


class NotificationService:
    async def _deliver(self, label: str, sends: List[Awaitable[bool]]) -> None:
        results = await asyncio.gather(*sends, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    f"{label} notification failed: {type(result).__name__}: {result}"
                )

    async def send_free_session_confirmation(
        self,
        email: str,
        phone: Optional[str],
        parent_name: str,
        kid_name: str,
        session_id: Optional[str] = None,
    ) -> None:
        message = free_session_message(parent_name, kid_name)
        sends = [send_email(email, FREE_SESSION_SUBJECT, message)]
        if phone:
            sends.append(send_whatsapp_message(phone, message))
        logger.info(
            f"Sending free session confirmation to {email}",
            extra={"extra_fields": {"session_id": session_id}},
        )
        await self._deliver("Free session", sends)

    async def send_session_change(
        self,
        email: str,
        phone: Optional[str],
        session_id: str,
        changes: str,
    ) -> None:
        message = session_change_message(changes)
        sends = [send_email(email, SESSION_UPDATE_SUBJECT, message)]
        if phone:
            sends.append(send_whatsapp_message(phone, message))
        logger.info(f"Sending session change for {session_id} to {email}")
        await self._deliver("Session change", sends)

    async def send_invoice_update(
        self,
        invoice_id: str,
        parent_email: str,
        parent_phone: Optional[str],
        status: str,
    ) -> None:
        message = invoice_update_message(status)
        logger.info(f"Sending invoice {invoice_id} update to {parent_email}")
        await self._deliver(
            "Invoice", [send_email(parent_email, INVOICE_UPDATE_SUBJECT, message)]
        )


_notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    """FastAPI dependency returning the shared notification service."""
    return _notification_service
