"""Exception handlers rendering every error as ``{"error": message}``."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from receptionist.core.errors import RateLimitError, ReceptionistError

logger = logging.getLogger(__name__)


async def receptionist_error_handler(request: Request, exc: ReceptionistError) -> JSONResponse:
    """Map the error taxonomy onto status codes."""
    if exc.status_code >= 500:
        logger.error(
            f"Request failed: {request.method} {request.url.path}: {exc.message}",
            extra={"error_type": type(exc).__name__},
        )
    else:
        logger.warning(
            f"Request rejected: {request.method} {request.url.path}: {exc.message}",
            extra={"error_type": type(exc).__name__, "status_code": exc.status_code},
        )

    headers = None
    if isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), not 422."""
    logger.warning(
        f"Validation error: {request.method} {request.url.path}",
        extra={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReceptionistError, receptionist_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
