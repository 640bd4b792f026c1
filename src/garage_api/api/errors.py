"""
garage_api.api.errors

HTTP rendering of domain errors.

Responsibilities:
- Map each `ErrorKind` to a stable HTTP status.
- Render every failure with one envelope: {"error": {"code", "message"}}.
- Keep internal detail (tracebacks, store messages) out of response bodies.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from garage_api.errors import ErrorKind, GarageError, InternalError
from garage_api.observability.logging import get_logger

log = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.unauthenticated: 401,
    ErrorKind.forbidden: 403,
    ErrorKind.not_found: 404,
    ErrorKind.already_exists: 409,
    ErrorKind.invalid_input: 422,
    ErrorKind.internal: 500,
}


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if kind is ErrorKind.unauthenticated else None
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={"error": {"code": str(kind), "message": message}},
        headers=headers,
    )


async def garage_error_handler(request: Request, exc: GarageError) -> JSONResponse:
    if isinstance(exc, InternalError):
        log.error("internal_error", detail=exc.detail, exc_info=exc)
    return error_response(exc.kind, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{where}: {err.get('msg', 'invalid')}" if where else err.get("msg", ""))
    log.info("request_invalid", problems=problems)
    return error_response(ErrorKind.invalid_input, "; ".join(problems) or "Invalid input")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", error=str(exc), exc_info=exc)
    return error_response(ErrorKind.internal, InternalError.default_message)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GarageError, garage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_error_handler)


# --- Module Notes -----------------------------------------------------------
# Path ids are typed `uuid.UUID`, so a malformed id fails request validation and
# is rendered as `invalid_input`.
