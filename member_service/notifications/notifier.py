"""Notification delivery for member lifecycle events."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from prometheus_client import Counter

from ..domain.errors import NotificationError
from ..domain.member import Member
from .templates import ADHOC_SUBJECT, render

logger = logging.getLogger(__name__)

NOTIFICATIONS = Counter(
    "member_notifications_total",
    "Notification delivery attempts by template and outcome.",
    ["template", "outcome"],
)


class Notifier(ABC):
    """Delivers messages to a member's registered email address.

    Subclasses implement :meth:`_deliver`; any exception it raises reaches
    the caller as :class:`NotificationError`.
    """

    def send(self, member: Member, content: str, *, subject: str = ADHOC_SUBJECT) -> None:
        """Deliver free-text ``content`` to ``member``."""
        self._dispatch("adhoc", member, subject, content)

    def send_verification(self, member: Member) -> None:
        """Send the welcome message carrying the verification link."""
        subject, body = render("verification", member)
        self._dispatch("verification", member, subject, body)

    def send_suspension(self, member: Member) -> None:
        """Notify ``member`` that their account was suspended."""
        subject, body = render("suspension", member)
        self._dispatch("suspension", member, subject, body)

    def _dispatch(self, template: str, member: Member, subject: str, content: str) -> None:
        try:
            self._deliver(member.email, subject, content)
        except NotificationError:
            NOTIFICATIONS.labels(template=template, outcome="failed").inc()
            raise
        except Exception as exc:
            NOTIFICATIONS.labels(template=template, outcome="failed").inc()
            raise NotificationError(f"could not deliver {template} message to {member.email}") from exc
        NOTIFICATIONS.labels(template=template, outcome="sent").inc()

    @abstractmethod
    def _deliver(self, recipient: str, subject: str, content: str) -> None:
        """Hand a rendered message to the transport."""


class LoggingNotifier(Notifier):
    """Writes messages to the log after a simulated transport delay."""

    def __init__(self, latency_seconds: float = 0.1) -> None:
        self._latency = max(0.0, latency_seconds)

    def _deliver(self, recipient: str, subject: str, content: str) -> None:
        logger.info("sending email to %s: subject=%r\n%s", recipient, subject, content.strip())
        if self._latency:
            time.sleep(self._latency)
