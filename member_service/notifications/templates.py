"""Message templates for member lifecycle notifications."""

from __future__ import annotations

from typing import Literal

from ..domain.member import Member

TemplateName = Literal["verification", "suspension"]

ADHOC_SUBJECT = "Message from Admin"

# Simple {placeholder} substitution over member attributes.
TEMPLATES: dict[TemplateName, dict[str, str]] = {
    "verification": {
        "subject": "Please verify your email address",
        "text": """Dear {name},

Welcome to our member management system!

Please verify your email address by clicking the link below:
[Verification Link: /verify/{account}]

Thank you for joining us!

Best regards,
Admin Team
""",
    },
    "suspension": {
        "subject": "Your account has been suspended",
        "text": """Dear {name},

We regret to inform you that your account has been suspended.

If you have any questions or concerns, please contact our support team.

Account: {account}
Email: {email}

Best regards,
Admin Team
""",
    },
}


def render(template: TemplateName, member: Member) -> tuple[str, str]:
    """Return ``(subject, body)`` for ``template`` filled in from ``member``."""
    entry = TEMPLATES[template]
    body = entry["text"].format(name=member.name, account=member.account, email=member.email)
    return entry["subject"], body
