"""Middleware for request context and the last-resort error envelope."""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from receptionist.core.tenant_context import clear_tenant_context, set_request_id

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and turn uncaught exceptions into JSON 500s."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with a fresh context.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Handler response, or ``500 {"error": ...}`` if the handler raised
        """
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        set_request_id(request_id)
        clear_tenant_context()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"Request failed: {request.method} {request.url.path}")
            response = JSONResponse(
                status_code=500,
                content={"error": str(e) or "Unknown error"},
            )

        response.headers["X-Request-Id"] = request_id
        return response
