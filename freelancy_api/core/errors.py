# freelancy_api/core/errors.py
"""
Error taxonomy for request handling.

``ApiError`` subclasses are HTTP exceptions: raising one from a handler ends
the request with that status and a ``{"error", "message"}`` body (see the
exception handlers in ``freelancy_api.main``).

``StoreError`` is raised by the resource store when the database itself fails.
It is deliberately not an HTTP exception so the driver message can be logged
but never sent to the client.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad request"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized access"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class StoreError(Exception):
    """The resource store could not complete an operation."""
