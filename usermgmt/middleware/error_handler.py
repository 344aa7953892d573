"""Single place where failures become the ``{success: false, message}`` body.

Every exception raised while handling a request is resolved by
``resolve_error`` into a status code and a client-safe message. Details stay
in the server log.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from usermgmt.core.exceptions import AppError, SchemaValidationError
from usermgmt.dtos import ErrorResponse

logger = logging.getLogger("usermgmt.errors")

SERVER_ERROR_MESSAGE = "Server Error"
_INDEX_NAME = re.compile(r"index:\s+(?:\S+\$)?(\w+?)_-?1\b")


def duplicate_key_field(exc: DuplicateKeyError) -> str:
    """Name of the first field in the violated unique index."""
    details = exc.details or {}
    for key in ("keyPattern", "keyValue"):
        fields = details.get(key)
        if fields:
            return next(iter(fields))
    match = _INDEX_NAME.search(str(exc))
    if match:
        return match.group(1)
    return "value"


def _request_validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return ", ".join(messages) or "Invalid request body"


def resolve_error(exc: BaseException) -> Tuple[int, str]:
    """
    Map a failure to (status_code, message).

    Starts from the status carried by the exception when it is set and not
    200, else 500. Schema validation failures and duplicate keys then force
    400 with their own message.
    """
    status_code: Optional[Any] = getattr(exc, "status_code", None)
    if not isinstance(status_code, int) or status_code in (0, status.HTTP_200_OK):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, AppError):
        message = exc.message
    elif isinstance(exc, StarletteHTTPException):
        message = str(exc.detail)
    else:
        message = SERVER_ERROR_MESSAGE

    if isinstance(exc, SchemaValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        message = ", ".join(exc.messages)
    elif isinstance(exc, RequestValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        message = _request_validation_message(exc)
    elif isinstance(exc, DuplicateKeyError):
        status_code = status.HTTP_400_BAD_REQUEST
        message = f"{duplicate_key_field(exc)} already exists"

    return status_code, message


def error_response(exc: BaseException) -> JSONResponse:
    status_code, message = resolve_error(exc)
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    response = error_response(exc)
    log_extra = {
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
    }
    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception("Unhandled error", exc_info=exc, extra=log_extra)
    else:
        logger.warning("Request failed: %s", exc, extra=log_extra)
    return response


def register_error_handlers(app: FastAPI) -> None:
    for exc_class in (
        AppError,
        DuplicateKeyError,
        RequestValidationError,
        StarletteHTTPException,
        Exception,
    ):
        app.add_exception_handler(exc_class, handle_error)
