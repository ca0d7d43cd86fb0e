"""
Application middleware for request/response processing
Handles CORS, request ids, logging, and error handling
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
import time
import uuid
import logging

from .config import settings
from .exceptions import StorefrontException
from storefront.middleware.route_guard import RouteGuardMiddleware

logger = logging.getLogger(__name__)

class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

class LoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests and responses"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        client = request.client.host if request.client else "unknown"

        logger.info("Request: %s %s from %s", request.method, request.url.path, client)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error("Request failed: %s Time: %.3fs", e, process_time)
            raise

        process_time = time.time() - start_time
        logger.info(
            "Response: %s Time: %.3fs Request ID: %s",
            response.status_code,
            process_time,
            getattr(request.state, "request_id", "N/A"),
        )
        response.headers["X-Process-Time"] = str(process_time)

        return response

class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global handler for unexpected exceptions"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled exception: %s", e)

            # Don't expose internal errors in production
            detail = str(e) if settings.DEBUG else "An unexpected error occurred"

            return error_response(request, 500, "INTERNAL_ERROR", detail)

def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    headers: dict = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
        headers=headers,
    )

async def storefront_exception_handler(request: Request, exc: StorefrontException) -> JSONResponse:
    """Render application exceptions in the common error envelope"""
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error_code, exc.detail)
    return error_response(request, exc.status_code, exc.error_code, exc.detail, exc.headers)

def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application"""
    app.add_exception_handler(StorefrontException, storefront_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first
    app.add_middleware(RouteGuardMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
