"""Main FastAPI application with middleware and logging setup."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from celltrack.core.config import settings, validate_jwt_secret
from celltrack.core.errors import setup_error_handlers
from celltrack.core.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    RequestLoggingMiddleware,
    setup_cors,
    setup_gzip,
)
from celltrack.auth.routes import router as auth_router
from celltrack.admin.routes import router as admin_router
from celltrack.leader.routes import router as leader_router
from celltrack.meeting_notes.routes import router as meeting_notes_router
from celltrack.week_events.routes import router as week_events_router
from celltrack.exports.routes import router as export_router

# API prefix constant
API_PREFIX = "/api"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class RequestIDDefaultFilter(logging.Filter):
    """Records logged outside a request still need a request_id for the text format."""

    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_logging() -> None:
    """Configure structured JSON (or human-readable text) logging to stdout."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        # Human-readable format for dev
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(request_id)s] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(RequestIDDefaultFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Clear existing handlers to avoid duplicates
    root_logger.handlers = []
    root_logger.addHandler(stdout_handler)

    # Set levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# Setup logging before creating app
setup_logging()
validate_jwt_secret(settings)

app = FastAPI(
    title="Cell Group Tracker API",
    version="1.0.0",
)

# Setup error handlers (must be done before routes are added)
setup_error_handlers(app, debug=not settings.is_production)

# Add middleware (last added = first executed)

# 1. GZip Compression (last to execute, first to add)
if settings.enable_gzip:
    setup_gzip(app)

# 2. CORS
setup_cors(app)

# 3. Request Logging (runs after the request ID is set)
if settings.enable_request_logging:
    app.add_middleware(RequestLoggingMiddleware)

# 4. Security Headers
app.add_middleware(SecurityHeadersMiddleware)

# 5. Request ID (first to execute, last to add)
app.add_middleware(RequestIDMiddleware)

# Include routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)
app.include_router(leader_router, prefix=API_PREFIX)
app.include_router(meeting_notes_router, prefix=API_PREFIX)
app.include_router(week_events_router, prefix=API_PREFIX)
app.include_router(export_router, prefix=API_PREFIX)


@app.get("/health")
async def health() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        {
            "status": "ok",
            "env": settings.app_env,
            "version": app.version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
