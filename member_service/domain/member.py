from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(slots=True)
class Member:
    """Aggregate root for a managed member, keyed by ``account``.

    ``is_active`` and ``is_verified`` are independent flags; every
    combination is a valid state.
    """

    account: str
    password: str
    email: str
    name: str
    line_id: str = ""
    address: str = ""
    role: str = "member"
    is_verified: bool = False
    is_active: bool = True

    def activate(self) -> None:
        self.is_active = True

    def suspend(self) -> None:
        self.is_active = False

    def verify_email(self) -> None:
        self.is_verified = True

    def delete_account(self) -> None:
        """Soft-delete the account; physical removal is the repository's job."""
        self.is_active = False

    def copy(self) -> Member:
        return replace(self)
