"""
garage_api.errors

Domain error taxonomy shared by services and the HTTP layer.

Responsibilities:
- Define one exception type per error kind (unauthenticated, forbidden, ...).
- Keep the client-visible message separate from internal detail.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.StrEnum):
    # Values are part of the public API (error envelope `code`); treat as stable.
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"
    not_found = "not_found"
    already_exists = "already_exists"
    invalid_input = "invalid_input"
    internal = "internal"


class GarageError(Exception):
    kind: ErrorKind = ErrorKind.internal
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(GarageError):
    kind = ErrorKind.unauthenticated
    default_message = "Invalid or missing credentials"


class Forbidden(GarageError):
    kind = ErrorKind.forbidden
    default_message = "Forbidden"


class NotFound(GarageError):
    kind = ErrorKind.not_found
    default_message = "Not found"


class AlreadyExists(GarageError):
    kind = ErrorKind.already_exists
    default_message = "Already exists"


class InvalidInput(GarageError):
    kind = ErrorKind.invalid_input
    default_message = "Invalid input"


class InternalError(GarageError):
    """
    Unexpected collaborator failure. The public message is always generic; the
    underlying exception is chained (`raise ... from e`) and logged server-side.
    """

    kind = ErrorKind.internal

    def __init__(self, message: str | None = None) -> None:
        super().__init__(None)
        self.detail = message


# --- Module Notes -----------------------------------------------------------
# HTTP status mapping lives in `api.errors`; services never import FastAPI.
