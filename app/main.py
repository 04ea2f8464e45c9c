# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Supplier Registration API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import API_VERSION, settings
from app.dependencies import build_submission_pipeline
from app.exceptions import (
    GENERIC_ERROR_MESSAGE,
    SupplierRegistrationException,
    supplier_registration_exception_handler,
)
from app.routers import health, suppliers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration and builds the submission pipeline
    on startup; logs on shutdown.
    """
    logger.info(f"Starting Supplier Registration API in {settings.ENVIRONMENT} mode")
    logger.info(
        f"Rate limit: {settings.RATE_LIMIT_MAX_SUBMISSIONS} submissions per "
        f"{settings.RATE_LIMIT_WINDOW_SECONDS}s ({settings.RATE_LIMIT_BACKEND})"
    )
    if not settings.notify_recipients_list:
        logger.warning("NOTIFY_RECIPIENTS is empty; new-supplier notices will not be sent")

    # One pipeline per process, so every request shares one set of counters
    app.state.submission_pipeline = build_submission_pipeline(settings)

    yield

    logger.info("Shutting down Supplier Registration API")


# Create FastAPI application
app = FastAPI(
    title="Hasapakia Supplier Registration API",
    description="""
## Supplier Registration

Backend for the public supplier registration form.

### How It Works

1. **Rate limit** - at most 3 submissions per client per hour
2. **Validate** - every field is checked; all problems are reported at once
3. **Upload** - logo, product images and catalog file go to public storage
4. **Save** - the supplier is stored with status `pending`
5. **Notify** - the team and the supplier receive an email

### Quick Start

```bash
curl -X POST http://localhost:8000/api/v1/submit-supplier \\
  -H "Content-Type: application/json" \\
  -d '{"businessName": "...", "contactName": "...", "phone": "...", "email": "...",
       "about": "...", "categories": ["אחר"], "activityAreas": ["מרכז"], "mainAddress": "..."}'
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Suppliers",
            "description": "Supplier registration form endpoints",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - the form is embedded on other sites
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SupplierRegistrationException)
async def handle_supplier_registration_exception(request: Request, exc: SupplierRegistrationException):
    """Handle tagged submission errors."""
    return await supplier_registration_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": GENERIC_ERROR_MESSAGE,
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Registration endpoints
app.include_router(
    suppliers.router,
    prefix="/api/v1",
    tags=["Suppliers"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Hasapakia Supplier Registration API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
