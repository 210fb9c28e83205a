"""
Exception handlers.

Convert ``ApplicationError`` subclasses raised anywhere below the routers
into JSON responses of the form ``{"detail": ..., "code": ...}``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notekeeper.core.exceptions import (
    ApplicationError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    ValidationError,
)
from notekeeper.core.logging import get_logger

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    ValidationError: 400,
    InvalidCredentialsError: 401,
    UnauthenticatedError: 401,
    NotFoundError: 404,
    DuplicateUsernameError: 409,
    StoreUnavailableError: 503,
}

AUTH_HEADERS = {"WWW-Authenticate": "Bearer"}


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)

    log_extra = {
        "code": exc.code,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if status_code >= 500:
        logger.error("application_error", error=exc.message, **log_extra)
    else:
        logger.info("application_error", error=exc.message, **log_extra)

    headers = AUTH_HEADERS if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
