"""
Error types raised by the board and how the API renders them.

Every rule violation is a ``TaskboardException`` carrying an error code and
an HTTP status. Responses share one body shape::

    {"error": "priority_limit", "message": "...", "details": [...]}

Request bodies that FastAPI itself rejects are rendered in the same shape.
"""

from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from taskboard.logging_config import get_logger

logger = get_logger(__name__)


class ErrorDetail(BaseModel):
    loc: Optional[List[str]] = None  # e.g. ["body", "priority"]
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
    message: str
    details: Optional[List[ErrorDetail]] = None


def field_error(loc: Sequence[str], msg: str, kind: str = "value_error") -> Dict[str, Any]:
    """One ``details`` entry pointing at a request field."""
    return {"loc": list(loc), "msg": msg, "type": kind}


class TaskboardException(Exception):
    """Base exception for all Taskboard errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error_code, message=self.message, details=self.details)


class NotFoundError(TaskboardException):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(TaskboardException):
    """A value the board refuses (empty title, missing requester, unknown role)."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=422,
            details=details,
        )


class PriorityLimitError(TaskboardException):
    """
    The team already holds its allowance of Urgent or High tasks for this
    week and area. ``message`` is the user-facing text from the capacity
    check.
    """

    def __init__(self, message: str, week: str, team: str, area: str, priority: str):
        super().__init__(
            message=message,
            error_code="priority_limit",
            status_code=status.HTTP_409_CONFLICT,
            details=[field_error(
                ["body", "priority"],
                f"{priority} is full for {team} / {area} in week {week}",
                kind="capacity_error",
            )],
        )
        self.week = week
        self.team = team
        self.area = area
        self.priority = priority


class PermissionDeniedError(TaskboardException):
    """The caller's role may not perform this action."""

    def __init__(self, role: str, action: str):
        super().__init__(
            message=f"Role {role} is not allowed to {action}",
            error_code="permission_denied",
            status_code=status.HTTP_403_FORBIDDEN,
        )
        self.role = role
        self.action = action


async def taskboard_exception_handler(request: Request, exc: TaskboardException) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own validation failures in the Taskboard error shape."""
    details = [
        field_error([str(part) for part in err.get("loc", ())], err.get("msg", ""), err.get("type", "value_error"))
        for err in exc.errors()
    ]
    body = ErrorResponse(error="validation_error", message="Invalid request", details=details)
    return JSONResponse(status_code=422, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskboardException, taskboard_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
