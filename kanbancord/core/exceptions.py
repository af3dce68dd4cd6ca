"""
Domain exceptions.

Every error carries the HTTP status it is rendered with, so services and the
resolver can raise them without knowing about the transport layer.
"""

from __future__ import annotations

from fastapi import status


class KanbanCordError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: dict[str, str] | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(KanbanCordError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class InvalidPermissionError(KanbanCordError, ValueError):
    status_code = 422

    def __init__(self, kind: str, value: object) -> None:
        super().__init__(f"Invalid {kind}: {value!r}")
        self.kind = kind
        self.value = value


class UnauthorizedError(KanbanCordError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(KanbanCordError):
    status_code = status.HTTP_403_FORBIDDEN


class BoardValidationError(KanbanCordError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST


class TokenIssuanceError(KanbanCordError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConflictError(KanbanCordError):
    status_code = status.HTTP_409_CONFLICT
