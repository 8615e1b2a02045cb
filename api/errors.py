"""
Domain error to HTTP mapping.

Every handler answers ``{"detail": message}``; anything unmapped becomes a
generic 500 with the traceback logged.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.domain.errors import (
    BadGateway,
    Conflict,
    DomainError,
    Forbidden,
    NotFound,
    ServiceUnavailable,
    Unauthorized,
    ValidationError,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (ServiceUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (BadGateway, status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: DomainError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code = status_for(exc)
    if isinstance(exc, WebhookSignatureError):
        message = WebhookSignatureError.default_message
    else:
        message = exc.message

    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected [{code}]: {message}")

    content = {"detail": message}
    if isinstance(exc, BadGateway) and exc.provider_response:
        content["providerResponse"] = exc.provider_response
    return JSONResponse(status_code=code, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
