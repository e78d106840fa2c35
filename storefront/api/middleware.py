"""API middleware for the Storefront API.

Provides:
- Request ID correlation
- Bearer token principal resolution
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.principal import InvalidTokenError, decode_principal
from storefront.domain.principal import Principal

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )

            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id

        return response


# ============================================================================
# Principal Middleware
# ============================================================================


class PrincipalMiddleware(BaseHTTPMiddleware):
    """Middleware resolving the caller from the Authorization header.

    Supports Bearer token format: "Authorization: Bearer <jwt>".
    A missing header yields an anonymous shopper; a malformed or invalid
    token is rejected with 401.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Attach the caller to the request state.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            request.state.principal = Principal.anonymous()
            return await call_next(request)

        parts = auth_header.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning(
                "Invalid authorization format",
                path=request.url.path,
                method=request.method,
            )
            return self._unauthorized(
                "Invalid Authorization header format. Use 'Bearer <token>'"
            )

        try:
            principal = decode_principal(parts[1])
        except InvalidTokenError as e:
            logger.warning(
                "Invalid bearer token",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return self._unauthorized("Invalid or expired token")

        request.state.principal = principal
        structlog.contextvars.bind_contextvars(user_id=principal.id)

        try:
            return await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("user_id")

    @staticmethod
    def _unauthorized(message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error_code": "UNAUTHORIZED",
                "message": message,
                "details": [],
            },
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches unhandled exceptions (store failures included) and returns
    standardized error responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", None)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error_code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "details": [],
                    "request_id": request_id,
                },
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    # Error handling (innermost - wraps the handlers)
    app.add_middleware(ErrorHandlerMiddleware)

    # Caller resolution
    app.add_middleware(PrincipalMiddleware)

    # Request ID correlation (outermost - every response gets the header)
    app.add_middleware(RequestIdMiddleware)
