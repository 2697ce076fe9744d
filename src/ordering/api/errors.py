"""Exception handlers that turn domain errors into JSON envelopes.

Client errors use ``{"status": "fail", "message": ...}``; unexpected faults use
``{"status": "error", ...}`` and are logged with their traceback.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from ordering.errors import Forbidden, NotAuthenticated

logger = structlog.get_logger(__name__)


def error_message(exc: Exception, default: str = "Invalid request") -> str:
    """First human-readable message carried by a protean exception."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        for errors in messages.values():
            if isinstance(errors, list | tuple) and errors:
                return str(errors[0])
            if errors:
                return str(errors)
    if messages:
        return str(messages)
    return str(exc) or default


def _fail(status_code: int, message: str, errors=None) -> JSONResponse:
    content = {"status": "fail", "message": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else None
    logger.info("Request rejected", path=request.url.path, error=error_message(exc))
    return _fail(400, error_message(exc), jsonable_encoder(messages) if messages else None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    return _fail(400, message, errors)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _fail(404, error_message(exc, "Not found"))


async def handle_invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _fail(400, error_message(exc, "Operation not allowed"))


async def handle_forbidden(request: Request, exc: Forbidden) -> JSONResponse:
    return _fail(403, exc.message)


async def handle_not_authenticated(request: Request, exc: NotAuthenticated) -> JSONResponse:
    return _fail(401, exc.message)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"status": "error", "message": "Something went wrong"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(InvalidOperationError, handle_invalid_operation)
    app.add_exception_handler(Forbidden, handle_forbidden)
    app.add_exception_handler(NotAuthenticated, handle_not_authenticated)
    app.add_exception_handler(Exception, handle_unexpected)
