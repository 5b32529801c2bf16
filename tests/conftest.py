from __future__ import annotations

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from member_service.config import Settings
from member_service.domain.errors import NotificationError
from member_service.domain.service import MemberService
from member_service.main import create_app
from member_service.notifications.notifier import Notifier
from member_service.repository import InMemoryMemberRepository


@dataclass
class SentMessage:
    recipient: str
    subject: str
    content: str


class RecordingNotifier(Notifier):
    """Notifier that keeps every delivered message in memory."""

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []

    def _deliver(self, recipient: str, subject: str, content: str) -> None:
        self.sent.append(SentMessage(recipient, subject, content))


class FailingNotifier(Notifier):
    """Notifier whose transport is always down."""

    def _deliver(self, recipient: str, subject: str, content: str) -> None:
        raise NotificationError("smtp unavailable")


@pytest.fixture
def repository() -> InMemoryMemberRepository:
    return InMemoryMemberRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(repository, notifier) -> MemberService:
    return MemberService(repository, notifier)


@pytest.fixture
def api_client(repository, notifier):
    """Provide a test client around an isolated store and recording notifier."""
    app = create_app(Settings(environment="development"), repository=repository, notifier=notifier)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def new_member_payload() -> dict[str, str]:
    return {
        "account": "u1",
        "password": "p",
        "email": "e@x.com",
        "name": "U",
    }
