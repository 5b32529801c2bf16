from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

import pytest

from member_service.domain.contracts import CreateMemberInput, MemberUpdate
from member_service.domain.errors import (
    DuplicateAccountError,
    MemberNotFoundError,
    MemberValidationError,
    NotificationError,
)
from member_service.domain.service import MemberService
from member_service.repository import InMemoryMemberRepository

from .conftest import FailingNotifier


def register(service: MemberService, account: str = "u1") -> None:
    service.create_member(
        CreateMemberInput(account=account, password="p", email=f"{account}@x.com", name=account.upper())
    )


def test_create_sends_verification(service, notifier):
    member, notified = service.create_member(
        CreateMemberInput(account="u1", password="p", email="e@x.com", name="U")
    )

    assert notified is True
    assert member.is_verified is False
    assert member.is_active is True
    assert service.get_member("u1") == member
    assert [m.recipient for m in notifier.sent] == ["e@x.com"]
    assert "/verify/u1" in notifier.sent[0].content


@pytest.mark.parametrize("missing", ["account", "password", "email", "name"])
def test_create_requires_fields(service, notifier, missing):
    fields = {"account": "u1", "password": "p", "email": "e@x.com", "name": "U"}
    fields[missing] = ""

    with pytest.raises(MemberValidationError, match="Missing required fields"):
        service.create_member(CreateMemberInput(**fields))
    assert service.list_members() == []
    assert notifier.sent == []


def test_duplicate_create_sends_nothing(service, notifier):
    register(service)
    with pytest.raises(DuplicateAccountError):
        register(service)
    assert len(notifier.sent) == 1
    assert len(service.list_members()) == 1


def test_create_survives_notification_failure(repository, caplog):
    service = MemberService(repository, FailingNotifier())

    with caplog.at_level(logging.WARNING, logger="member_service.domain.service"):
        member, notified = service.create_member(
            CreateMemberInput(account="u1", password="p", email="e@x.com", name="U")
        )

    assert notified is False
    assert repository.get_member("u1") == member
    assert "notification to member u1 failed" in caplog.text


def test_deactivate_sends_one_suspension(service, notifier):
    register(service)
    notifier.sent.clear()

    member, notified = service.deactivate_member("u1")

    assert notified is True
    assert member.is_active is False
    assert len(notifier.sent) == 1
    assert notifier.sent[0].recipient == "u1@x.com"
    assert "suspended" in notifier.sent[0].content


def test_activation_follows_last_call(service):
    register(service)
    service.deactivate_member("u1")
    service.activate_member("u1")
    assert service.get_member("u1").is_active is True
    service.activate_member("u1")
    service.deactivate_member("u1")
    assert service.get_member("u1").is_active is False


@pytest.mark.parametrize("account", [None, ""])
def test_activation_requires_id(service, account):
    with pytest.raises(MemberValidationError, match="Member ID is required"):
        service.activate_member(account)
    with pytest.raises(MemberValidationError, match="Member ID is required"):
        service.deactivate_member(account)


def test_deactivate_unknown_sends_nothing(service, notifier):
    with pytest.raises(MemberNotFoundError):
        service.deactivate_member("ghost")
    assert notifier.sent == []


def test_update_merges_whitelisted_fields(service):
    register(service)
    before = service.get_member("u1")

    after = service.update_member(MemberUpdate(account="u1", changes={"name": "New Name"}))

    assert after.name == "New Name"
    assert after.email == before.email
    assert after.password == before.password
    assert after.is_active == before.is_active


def test_update_unknown_member(service):
    with pytest.raises(MemberNotFoundError):
        service.update_member(MemberUpdate(account="ghost", changes={"name": "x"}))


def test_update_requires_account(service):
    with pytest.raises(MemberValidationError, match="account is required"):
        service.update_member(MemberUpdate(account="", changes={"name": "x"}))


def test_delete_members(service):
    register(service, "a")
    register(service, "b")
    assert service.delete_members(["a", "b"]) == 2
    assert service.list_members() == []


@pytest.mark.parametrize("ids", [None, [], "a", {"a": 1}, [1]])
def test_delete_members_requires_ids(service, ids):
    with pytest.raises(MemberValidationError, match="Member IDs array is required"):
        service.delete_members(ids)


def test_verify_email_persists(service):
    register(service)
    assert service.verify_email("u1").is_verified is True
    assert service.get_member("u1").is_verified is True


def test_verify_unknown(service):
    with pytest.raises(MemberNotFoundError):
        service.verify_email("ghost")


def test_send_email(service, notifier):
    register(service)
    notifier.sent.clear()
    service.send_email("u1", "Meeting moved to Friday")
    assert notifier.sent[0].content == "Meeting moved to Friday"


def test_send_email_checks_content_before_member(service):
    with pytest.raises(MemberValidationError, match="Email content is required"):
        service.send_email("ghost", "")
    with pytest.raises(MemberNotFoundError):
        service.send_email("ghost", "hello")


def test_send_email_propagates_delivery_failure(repository):
    service = MemberService(repository, FailingNotifier())
    service.create_member(CreateMemberInput(account="u1", password="p", email="e@x.com", name="U"))

    with pytest.raises(NotificationError):
        service.send_email("u1", "hello")


class InterleavingRepository(InMemoryMemberRepository):
    """Runs ``between`` once, right after the next read returns."""

    def __init__(self) -> None:
        super().__init__()
        self.between: Callable[[], object] | None = None

    def get_member(self, account):
        member = super().get_member(account)
        if self.between is not None:
            action, self.between = self.between, None
            action()
        return member


@pytest.mark.parametrize(
    "change",
    [
        lambda service: service.verify_email("u1"),
        lambda service: service.update_member(MemberUpdate(account="u1", changes={"name": "N"})),
    ],
)
def test_changes_do_not_undo_a_concurrent_deactivation(notifier, change):
    repository = InterleavingRepository()
    service = MemberService(repository, notifier)
    register(service)
    repository.between = lambda: service.deactivate_member("u1")

    change(service)
    if repository.between is not None:
        service.deactivate_member("u1")

    assert repository.get_member("u1").is_active is False


def test_parallel_verify_and_deactivate_keep_both_flags(service):
    accounts = [f"m{i}" for i in range(40)]
    for account in accounts:
        register(service, account)

    jobs = [(service.verify_email, a) for a in accounts] + [(service.deactivate_member, a) for a in accounts]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda job: job[0](job[1]), jobs))

    for member in service.list_members():
        assert member.is_verified is True
        assert member.is_active is False
