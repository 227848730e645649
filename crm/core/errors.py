# core/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class CRMError(Exception):
    """Base error mapped 1:1 onto an HTTP response of ``{"error": message}``."""

    status_code = 500
    message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequest(CRMError):
    status_code = 400
    message = "Bad request"


class Unauthenticated(CRMError):
    status_code = 401
    message = "Access token is missing or invalid"


class Forbidden(CRMError):
    status_code = 403
    message = "Access denied"


class NotFound(CRMError):
    status_code = 404
    message = "Not found"


class Conflict(CRMError):
    # Uniqueness violations answer 400, not 409
    status_code = 400
    message = "Already exists"


class InternalError(CRMError):
    status_code = 500


def _field_name(loc) -> str:
    # ("body", "password") -> "password"; ("query", "search") -> "search"
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts)


async def crm_error_handler(request: Request, exc: CRMError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(err["loc"]), "message": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CRMError, crm_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
