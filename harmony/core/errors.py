"""
Custom exception hierarchy for the Harmony progress engine.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

Advisor failures (`AdvisorUnavailable`, `MalformedAdvisorResponse`) are
internal: the decision resolver absorbs them into its fallback record and
they never reach an HTTP handler.
"""
from __future__ import annotations

import math
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class HarmonyException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


def _json_safe(value: Any) -> Any:
    """Echo plain JSON scalars back as-is; anything else as its repr."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return repr(value)


class InvalidInputError(HarmonyException):
    """A value outside its documented domain. State is left unchanged."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_INPUT"

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid value for {field}: {reason}.",
            details={"field": field, "value": _json_safe(value)},
        )


class RoomNotFoundError(HarmonyException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ROOM_NOT_FOUND"

    def __init__(self, room_id: str):
        super().__init__(
            message=f"Room {room_id!r} does not exist.",
            details={"room_id": room_id},
        )


class CategoryNotFoundError(HarmonyException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "CATEGORY_NOT_FOUND"

    def __init__(self, room_id: str, name: str):
        super().__init__(
            message=f"Room {room_id!r} has no category named {name!r}.",
            details={"room_id": room_id, "category": name},
        )


class ChallengeNotFoundError(HarmonyException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "CHALLENGE_NOT_FOUND"

    def __init__(self, challenge_id: str):
        super().__init__(
            message=f"No active seasonal challenge {challenge_id!r}.",
            details={"challenge_id": challenge_id},
        )


class AdvisorUnavailable(HarmonyException):
    code = "ADVISOR_UNAVAILABLE"


class MalformedAdvisorResponse(HarmonyException):
    code = "MALFORMED_ADVISOR_RESPONSE"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def harmony_exception_handler(request: Request, exc: HarmonyException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
