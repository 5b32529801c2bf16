"""HTTP route definitions for the member service."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from ..domain.contracts import CreateMemberInput, MemberUpdate
from ..domain.errors import MemberServiceError
from ..domain.member import Member
from ..domain.service import MemberService
from .errors import ApiError, api_error_from_domain


router = APIRouter(prefix="/members", tags=["members"])

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Standard response wrapper: ``{success, data?, message?}``."""

    success: bool = True
    data: DataT | None = None
    message: str | None = None


class MemberResponse(BaseModel):
    """Serialised representation of a `Member`; the password is never exposed."""

    model_config = ConfigDict(populate_by_name=True)

    account: str
    email: str
    line_id: str = Field(alias="lineID")
    name: str
    address: str
    role: str
    is_verified: bool = Field(alias="isVerified")
    is_active: bool = Field(alias="isActive")

    @classmethod
    def from_domain(cls, member: Member) -> "MemberResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            account=member.account,
            email=member.email,
            line_id=member.line_id,
            name=member.name,
            address=member.address,
            role=member.role,
            is_verified=member.is_verified,
            is_active=member.is_active,
        )


class DeleteResult(BaseModel):
    deleted: int


class CreateMemberRequest(BaseModel):
    """Payload accepted when registering a member.

    Every field is optional at the schema level; presence of the required
    ones is checked by the service so the client gets a single message
    listing them.
    """

    model_config = ConfigDict(populate_by_name=True)

    account: str | None = None
    password: str | None = None
    email: str | None = None
    name: str | None = None
    line_id: str | None = Field(default=None, alias="lineID")
    address: str | None = None
    role: str | None = None

    def to_input(self) -> CreateMemberInput:
        return CreateMemberInput(
            account=self.account or "",
            password=self.password or "",
            email=self.email or "",
            name=self.name or "",
            line_id=self.line_id or "",
            address=self.address or "",
            role=self.role or "member",
        )


class UpdateMemberRequest(BaseModel):
    """Partial update; ``account`` selects the member and is never changed."""

    model_config = ConfigDict(populate_by_name=True)

    account: str | None = None
    password: str | None = None
    email: str | None = None
    line_id: str | None = Field(default=None, alias="lineID")
    name: str | None = None
    address: str | None = None
    role: str | None = None
    is_verified: bool | None = Field(default=None, alias="isVerified")
    is_active: bool | None = Field(default=None, alias="isActive")

    def to_update(self) -> MemberUpdate:
        changes = self.model_dump(exclude_unset=True, exclude={"account"})
        return MemberUpdate(account=self.account or "", changes=changes)


class MemberIdRequest(BaseModel):
    id: str | None = None


class DeleteMembersRequest(BaseModel):
    # Shape is checked by the service so a non-array gets the same message as a missing one.
    ids: Any = None


class SendEmailRequest(BaseModel):
    content: str | None = None


def get_service(request: Request) -> MemberService:
    """Resolve the `MemberService` stored on the FastAPI application state."""
    service: MemberService = request.app.state.member_service
    return service


@router.get("", response_model=Envelope[list[MemberResponse]], response_model_exclude_none=True)
def list_members(service: MemberService = Depends(get_service)) -> Envelope[list[MemberResponse]]:
    members = service.list_members()
    return Envelope[list[MemberResponse]](data=[MemberResponse.from_domain(m) for m in members])


@router.get("/{account}", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def get_member(account: str, service: MemberService = Depends(get_service)) -> Envelope[MemberResponse]:
    member = service.get_member(account)
    if member is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Member not found")
    return Envelope[MemberResponse](data=MemberResponse.from_domain(member))


@router.post(
    "",
    response_model=Envelope[MemberResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_member(
    payload: CreateMemberRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[MemberResponse]:
    """Register a member and send the verification email."""
    try:
        member, notified = service.create_member(payload.to_input())
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to create member") from exc
    message = "Member created successfully. " + (
        "Verification email sent." if notified else "Verification email could not be sent."
    )
    return Envelope[MemberResponse](data=MemberResponse.from_domain(member), message=message)


@router.post("/activate", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def activate_member(
    payload: MemberIdRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[MemberResponse]:
    try:
        service.activate_member(payload.id)
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to activate member") from exc
    return Envelope[MemberResponse](message="Member activated successfully")


@router.post("/deactivation", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def deactivate_member(
    payload: MemberIdRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[MemberResponse]:
    """Suspend a member and notify them by email."""
    try:
        _, notified = service.deactivate_member(payload.id)
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to deactivate member") from exc
    message = "Member deactivated successfully. " + (
        "Notification email sent." if notified else "Notification email could not be sent."
    )
    return Envelope[MemberResponse](message=message)


@router.put("", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def update_member(
    payload: UpdateMemberRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[MemberResponse]:
    try:
        member = service.update_member(payload.to_update())
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to update member") from exc
    return Envelope[MemberResponse](
        data=MemberResponse.from_domain(member),
        message="Member updated successfully",
    )


@router.delete("", response_model=Envelope[DeleteResult], response_model_exclude_none=True)
def delete_members(
    payload: DeleteMembersRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[DeleteResult]:
    """Delete several members at once; fails without deleting if any id is unknown."""
    try:
        deleted = service.delete_members(payload.ids)
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to delete members") from exc
    return Envelope[DeleteResult](
        data=DeleteResult(deleted=deleted),
        message=f"Successfully deleted {deleted} members",
    )


@router.post("/{account}/verify", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def verify_email(account: str, service: MemberService = Depends(get_service)) -> Envelope[MemberResponse]:
    try:
        service.verify_email(account)
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to verify email") from exc
    return Envelope[MemberResponse](message="Email verified successfully")


@router.post("/{account}/send-email", response_model=Envelope[MemberResponse], response_model_exclude_none=True)
def send_email(
    account: str,
    payload: SendEmailRequest,
    service: MemberService = Depends(get_service),
) -> Envelope[MemberResponse]:
    try:
        service.send_email(account, payload.content)
    except MemberServiceError as exc:
        raise api_error_from_domain(exc, "Failed to send email") from exc
    return Envelope[MemberResponse](message="Email sent successfully")
