"""Exceptions raised by the member store, notifier and service."""

from __future__ import annotations

from typing import Iterable


class MemberServiceError(Exception):
    """Base class for all member service failures."""


class MemberValidationError(MemberServiceError):
    """A required request field is missing or empty."""


class MemberNotFoundError(MemberServiceError):
    """One or more accounts do not exist in the store."""

    def __init__(self, accounts: str | Iterable[str]) -> None:
        if isinstance(accounts, str):
            accounts = [accounts]
        self.accounts: list[str] = list(accounts)
        super().__init__("Member not found")


class DuplicateAccountError(MemberServiceError):
    def __init__(self, account: str) -> None:
        self.account = account
        super().__init__("Member with this account already exists")


class NotificationError(MemberServiceError):
    """A notifier could not deliver a message."""
