"""
Notification Dispatcher

Delivers the email that an application status transition asks for.

CONTRACT:
- dispatch() is awaited by the caller but never raises
- each attempt is bounded by settings.email_timeout_seconds
- failures are logged and reported through DeliveryResult; there is no
  retry queue, so a failed dispatch is a lost notification

The workflow engine produces an OutboundEvent after its transaction commits;
routes hand that event to `deliver()`. Whatever happens here cannot change
the result of the status update.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from campus_recruit.core.config import get_settings
from campus_recruit.services.email_templates import (
    RenderedEmail, render_interview_invite, render_offer_letter,
)
from campus_recruit.services.mailer import get_mailer

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    OFFER = "OFFER"
    INTERVIEW_INVITE = "INTERVIEW_INVITE"


@dataclass(frozen=True)
class OutboundEvent:
    """What a status transition wants delivered, captured at commit time."""
    kind: NotificationKind
    to: str
    student_name: str
    company_name: str
    job_title: str
    message: str = ""


@dataclass(frozen=True)
class DeliveryResult:
    kind: NotificationKind
    recipient: str
    delivered: bool
    error: Optional[str] = None


def render_notification(kind: NotificationKind, args: dict) -> RenderedEmail:
    if kind == NotificationKind.OFFER:
        return render_offer_letter(
            args["student_name"], args["company_name"], args["job_title"]
        )
    if kind == NotificationKind.INTERVIEW_INVITE:
        return render_interview_invite(
            args["student_name"], args["company_name"], args["job_title"],
            note=args.get("message") or "",
        )
    raise ValueError(f"Unknown notification kind: {kind}")


class NotificationDispatcher:
    """
    Best-effort email delivery.

    The mailer is resolved on every dispatch so a transport swapped in with
    mailer.set_mailer() takes effect immediately.
    """

    def __init__(self, mailer=None, timeout: Optional[float] = None):
        self._mailer = mailer
        self.timeout = timeout if timeout is not None else get_settings().email_timeout_seconds

    @property
    def mailer(self):
        return self._mailer or get_mailer()

    async def dispatch(self, kind: NotificationKind, recipient: str, args: dict) -> DeliveryResult:
        try:
            email = render_notification(kind, args)
            await asyncio.wait_for(
                asyncio.to_thread(self.mailer.send, recipient, email),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Timed out after %.1fs sending %s email to %s", self.timeout, kind.value, recipient
            )
            return DeliveryResult(kind, recipient, delivered=False, error="timeout")
        except Exception as e:
            logger.exception("Failed to send %s email to %s", kind.value, recipient)
            return DeliveryResult(kind, recipient, delivered=False, error=str(e))

        logger.info("Sent %s email to %s", kind.value, recipient)
        return DeliveryResult(kind, recipient, delivered=True)

    async def deliver(self, event: Optional[OutboundEvent]) -> Optional[DeliveryResult]:
        """Dispatch an OutboundEvent; None means the transition sends nothing."""
        if event is None:
            return None
        return await self.dispatch(
            event.kind,
            event.to,
            {
                "student_name": event.student_name,
                "company_name": event.company_name,
                "job_title": event.job_title,
                "message": event.message,
            },
        )


_dispatcher: NotificationDispatcher = None


def get_dispatcher() -> NotificationDispatcher:
    """Get or create the dispatcher (singleton)."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher
