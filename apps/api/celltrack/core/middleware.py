"""Request ID, security header, request logging, CORS and gzip middleware."""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from celltrack.core.config import settings

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
SENSITIVE_PARAMS = ("password", "token", "secret")

# Not worth a log line per hit
UNLOGGED_PATHS = ("/health", "/docs", "/openapi.json", "/redoc")

# Frontend dev servers
DEV_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _redact_query(params: dict[str, str]) -> dict[str, str]:
    """Query parameters with credential-like values masked."""
    return {
        key: REDACTED if any(word in key.lower() for word in SENSITIVE_PARAMS) else value
        for key, value in params.items()
    }


def _log_event(level: int, request_id: str, **fields) -> None:
    logger.log(
        level,
        json.dumps({"request_id": request_id, **fields}, default=str),
        extra={"request_id": request_id},
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One structured line per request and one per response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path.startswith(UNLOGGED_PATHS):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", "unknown")
        started = time.perf_counter()

        _log_event(
            logging.INFO,
            request_id,
            type="http_request",
            method=request.method,
            path=path,
            query_params=_redact_query(dict(request.query_params)),
            client_host=request.client.host if request.client else None,
        )

        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception:
            logger.exception(
                f"Unhandled error on {request.method} {path}",
                extra={"request_id": request_id},
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - started) * 1000
            if status_code >= 500:
                level = logging.ERROR
            elif status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO
            _log_event(
                level,
                request_id,
                type="http_response",
                method=request.method,
                path=path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
            )

        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
        return response


def cors_origins() -> list[str]:
    """Configured origins; the dev servers when none are set outside production."""
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if not origins and not settings.is_production:
        return DEV_CORS_ORIGINS
    return origins


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        # browsers need Content-Disposition to name export downloads
        expose_headers=["X-Request-ID", "X-Process-Time", "Content-Disposition"],
    )


def setup_gzip(app: FastAPI) -> None:
    app.add_middleware(GZipMiddleware, minimum_size=500)
