"""Error envelope rendering for the HTTP layer."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import MemberNotFoundError, MemberServiceError, MemberValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Something went wrong"


class ApiError(Exception):
    """Failure rendered as ``{"success": false, "message": ..., "error": ...}``.

    ``detail`` is only exposed to clients in development mode.
    """

    def __init__(self, status_code: int, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.detail = detail


def api_error_from_domain(exc: MemberServiceError, failure_message: str) -> ApiError:
    """Map a domain exception onto an :class:`ApiError`.

    ``failure_message`` is used for errors that surface as 500.
    """
    if isinstance(exc, MemberValidationError):
        return ApiError(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, MemberNotFoundError):
        message = "Member not found"
        if len(exc.accounts) > 1:
            message = f"Members not found: {', '.join(exc.accounts)}"
        return ApiError(status.HTTP_404_NOT_FOUND, message)
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure_message, detail=str(exc))


def _envelope(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


def register_exception_handlers(app: FastAPI, *, expose_details: bool) -> None:
    """Install handlers that render every failure in the response envelope."""

    def _error_field(detail: str | None) -> str | None:
        if detail is None:
            return None
        return detail if expose_details else GENERIC_ERROR_DETAIL

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(exc.message, _error_field(exc.detail)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=_envelope(message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope("Invalid request body", _error_field(str(exc.errors()))),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope("Internal server error", _error_field(str(exc))),
        )
