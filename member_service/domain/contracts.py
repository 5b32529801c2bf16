"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .member import Member

# ``account`` is the identity key and is deliberately absent.
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "email",
        "line_id",
        "name",
        "address",
        "role",
        "is_verified",
        "is_active",
    }
)


@dataclass(slots=True)
class CreateMemberInput:
    """Inputs required to register a new member."""

    account: str
    password: str
    email: str
    name: str
    line_id: str = ""
    address: str = ""
    role: str = "member"

    def to_member(self) -> Member:
        return Member(
            account=self.account,
            password=self.password,
            email=self.email,
            name=self.name,
            line_id=self.line_id,
            address=self.address,
            role=self.role,
        )


@dataclass(slots=True)
class MemberUpdate:
    """Partial update of an existing member, limited to ``UPDATABLE_FIELDS``."""

    account: str
    changes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = set(self.changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields cannot be updated: {', '.join(sorted(unknown))}")

    def apply(self, member: Member) -> Member:
        """Return a copy of ``member`` with every non-null change applied."""
        updated = member.copy()
        for name, value in self.changes.items():
            if value is not None:
                setattr(updated, name, value)
        return updated
