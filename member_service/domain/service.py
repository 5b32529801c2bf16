"""Member service orchestrating the member store and notifications."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .contracts import CreateMemberInput, MemberUpdate
from .errors import MemberNotFoundError, MemberValidationError, NotificationError
from .member import Member
from ..notifications.notifier import Notifier
from ..repository import InMemoryMemberRepository

logger = logging.getLogger(__name__)


def _require(message: str, *values: object) -> None:
    if any(value is None or value == "" for value in values):
        raise MemberValidationError(message)


class MemberService:
    """Member workflows backed by the in-memory store.

    Lifecycle notices (verification on create, suspension on deactivate) are
    best-effort: a delivery failure is logged and reported through the
    returned ``notified`` flag instead of failing the transition. Ad-hoc
    messages sent through :meth:`send_email` propagate delivery failures.
    """

    def __init__(self, repository: InMemoryMemberRepository, notifier: Notifier) -> None:
        """Store the collaborators used by every workflow."""
        self._repository = repository
        self._notifier = notifier

    def list_members(self) -> list[Member]:
        return self._repository.list_members()

    def get_member(self, account: str) -> Member | None:
        return self._repository.get_member(account)

    def create_member(self, payload: CreateMemberInput) -> tuple[Member, bool]:
        """Register a member and send the verification message.

        Returns the stored member and whether the verification message was
        delivered.
        """
        _require(
            "Missing required fields: account, password, email, name",
            payload.account,
            payload.password,
            payload.email,
            payload.name,
        )
        member = self._repository.create_member(payload.to_member())
        logger.info("member %s created", member.account)
        notified = self._notify(self._notifier.send_verification, member)
        return member, notified

    def activate_member(self, account: str | None) -> Member:
        _require("Member ID is required", account)
        member = self._repository.activate_member(account)
        logger.info("member %s activated", account)
        return member

    def deactivate_member(self, account: str | None) -> tuple[Member, bool]:
        """Suspend a member and send the suspension notice."""
        _require("Member ID is required", account)
        member = self._repository.deactivate_member(account)
        logger.info("member %s deactivated", account)
        notified = self._notify(self._notifier.send_suspension, member)
        return member, notified

    def update_member(self, update: MemberUpdate) -> Member:
        """Merge the whitelisted fields of ``update`` onto the stored member."""
        _require("Member account is required for update", update.account)
        member = self._repository.apply_update(update)
        logger.info("member %s updated fields=%s", member.account, sorted(update.changes))
        return member

    def delete_members(self, accounts: Any) -> int:
        """Delete every listed member; nothing is deleted if any id is unknown."""
        if not isinstance(accounts, list) or not accounts or not all(isinstance(a, str) for a in accounts):
            raise MemberValidationError("Member IDs array is required")
        deleted = self._repository.delete_members(accounts)
        logger.info("deleted %d members", deleted)
        return deleted

    def verify_email(self, account: str) -> Member:
        member = self._repository.verify_member(account)
        logger.info("member %s verified", account)
        return member

    def send_email(self, account: str, content: str | None) -> None:
        _require("Email content is required", content)
        member = self._repository.get_member(account)
        if member is None:
            raise MemberNotFoundError(account)
        self._notifier.send(member, content)

    def _notify(self, send: Callable[[Member], None], member: Member) -> bool:
        try:
            send(member)
        except NotificationError as exc:
            logger.warning("notification to member %s failed: %s", member.account, exc)
            return False
        return True
