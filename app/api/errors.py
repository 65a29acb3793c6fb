"""Voyage CMS - Error Responses.

Translates the error taxonomy into JSON responses of the form
``{"error": "..."}``. Validation failures also list the offending fields.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.errors import AuthError, CMSError, IntegrityError, ValidationError
from app.core.logging import get_logger

logger = get_logger("api.errors")


async def handle_cms_error(request: Request, exc: CMSError) -> JSONResponse:
    body = {"error": exc.message}
    if isinstance(exc, ValidationError) and exc.fields:
        body["fields"] = exc.fields
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            extra={"status_code": exc.status_code},
        )
    return JSONResponse(status_code=exc.status_code, content=body)


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error(
        f"Stored record failed to decode on {request.url.path}: {exc.message}",
        exc_info=exc,
        extra={"status_code": 500},
    )
    body = {"error": "Internal data error"}
    if settings.is_development:
        body["details"] = exc.message
    return JSONResponse(status_code=500, content=body)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"status_code": 500},
    )
    body = {"error": "Internal server error"}
    if settings.is_development:
        body["details"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(CMSError, handle_cms_error)
    app.add_exception_handler(Exception, handle_unexpected)
