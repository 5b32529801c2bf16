"""In-memory repository for member records."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Iterable

from .domain.contracts import MemberUpdate
from .domain.errors import DuplicateAccountError, MemberNotFoundError
from .domain.member import Member

logger = logging.getLogger(__name__)


class InMemoryMemberRepository:
    """Thread-safe member store keyed by account.

    Records are copied on the way in and on the way out, so callers never
    hold a reference to the canonical record; changes only become visible
    through :meth:`update_member` or the activation helpers.
    """

    def __init__(self) -> None:
        """Initialise the empty collection and its guard."""
        self._members: dict[str, Member] = {}
        self._lock = Lock()

    def list_members(self) -> list[Member]:
        """Return a snapshot of all members in insertion order."""
        with self._lock:
            return [member.copy() for member in self._members.values()]

    def get_member(self, account: str) -> Member | None:
        """Fetch a member by account or return ``None``."""
        with self._lock:
            member = self._members.get(account)
            return member.copy() if member is not None else None

    def create_member(self, member: Member) -> Member:
        """Insert a new member, rejecting accounts that already exist."""
        with self._lock:
            if member.account in self._members:
                raise DuplicateAccountError(member.account)
            self._members[member.account] = member.copy()
            logger.debug("stored member %s", member.account)
            return member.copy()

    def update_member(self, member: Member) -> Member:
        """Replace the stored record for ``member.account`` wholesale."""
        with self._lock:
            if member.account not in self._members:
                raise MemberNotFoundError(member.account)
            self._members[member.account] = member.copy()
            return member.copy()

    def apply_update(self, update: MemberUpdate) -> Member:
        """Merge ``update`` onto the stored record in one critical section."""
        with self._lock:
            member = update.apply(self._require(update.account))
            self._members[member.account] = member
            return member.copy()

    def verify_member(self, account: str) -> Member:
        with self._lock:
            member = self._require(account)
            member.verify_email()
            return member.copy()

    def delete_member(self, account: str) -> None:
        with self._lock:
            if account not in self._members:
                raise MemberNotFoundError(account)
            del self._members[account]

    def delete_members(self, accounts: Iterable[str]) -> int:
        """Remove every listed account, or none of them if any is unknown."""
        unique = list(dict.fromkeys(accounts))
        with self._lock:
            missing = [account for account in unique if account not in self._members]
            if missing:
                raise MemberNotFoundError(missing)
            for account in unique:
                del self._members[account]
        return len(unique)

    def activate_member(self, account: str) -> Member:
        with self._lock:
            member = self._require(account)
            member.activate()
            return member.copy()

    def deactivate_member(self, account: str) -> Member:
        with self._lock:
            member = self._require(account)
            member.suspend()
            return member.copy()

    def _require(self, account: str) -> Member:
        """Return the canonical record; callers must hold the lock."""
        member = self._members.get(account)
        if member is None:
            raise MemberNotFoundError(account)
        return member
