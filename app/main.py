"""
FastAPI application demonstrating the OAuth2 authorization code flow.

This module wires dependencies and configures the application.
Flow logic is in app/codeflow, request plumbing in app/middleware.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from app.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from app.codeflow import router as codeflow_router  # noqa: E402
from app.codeflow.config import get_app_config  # noqa: E402
from app.codeflow.exceptions import CodeFlowError  # noqa: E402
from app.middleware.request_context import (  # noqa: E402
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    get_request_id,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Validates configuration on startup so a misconfigured deployment fails
    before serving traffic.
    """
    logger.info("Application starting up...")
    get_app_config().validate()
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="Code Flow Client",
    description="OAuth2 authorization code flow calling a protected forecast API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(CodeFlowError)
async def codeflow_error_handler(request: Request, exc: CodeFlowError):
    """
    Handle every authorization code flow failure the same way.

    The specific failure is logged; the user only sees a generic error with
    the request ID for correlation.
    """
    request_id = get_request_id()
    logger.error(
        f"{type(exc).__name__}: {str(exc)}",
        exc_info=exc,
        extra={"extra_fields": {"error_type": type(exc).__name__}},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "message": "An error occurred while processing your request.",
            "request_id": request_id,
        },
        headers={REQUEST_ID_HEADER: request_id},
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "codeflow-client",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(codeflow_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
