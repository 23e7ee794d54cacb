"""
Consolidated middleware for the sandbox API
"""

import time
import logging
from http import HTTPStatus
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.responses import error_response
from app.exceptions import NidusError

logger = logging.getLogger("nidus.sandbox.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def envelope(status_code: int, message) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(status_code, message, reason_phrase(status_code)),
    )


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors; one message per failing field"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    messages = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return envelope(status.HTTP_400_BAD_REQUEST, messages)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")
    return envelope(exc.status_code, str(exc.detail))


async def nidus_exception_handler(request: Request, exc: NidusError):
    """Handle domain errors raised by the store and dependencies"""
    logger.warning(f"{exc.__class__.__name__} on {request.url}: {exc.message}")
    return envelope(exc.http_status, exc.message)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")
    return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")
