"""Render every failure as ``{"error": message}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inbox.domain.errors import InboxError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error."


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_inbox_error(request: Request, exc: InboxError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Error handling request %s: %s", request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Unknown paths and unsupported methods both answer "Not found".
    if exc.status_code in (404, 405):
        return error_response(404, "Not found")
    return error_response(exc.status_code, str(exc.detail))


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    locations = {error.get("loc", ("body",))[0] for error in exc.errors()}
    if locations <= {"query", "path"}:
        return error_response(400, "Invalid request query")
    return error_response(400, "Invalid request body")


async def catch_unhandled_errors(request: Request, call_next):
    """Turn unexpected exceptions into a 500 the CORS layer can still decorate."""

    try:
        return await call_next(request)
    except Exception:
        logger.exception("Error handling request %s %s", request.method, request.url.path)
        return error_response(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InboxError, handle_inbox_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)


__all__ = [
    "catch_unhandled_errors",
    "error_response",
    "register_exception_handlers",
]
