"""
FastAPI Application Entry Point

This module initializes the FastAPI application with:
- CORS configuration
- Middleware setup
- Route registration
- Health check endpoints
- Error rendering as {"error": message}
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import AppError
from app.db.database import check_db_connection, AsyncSessionLocal
from app.middleware.logging import LoggingMiddleware
from app.services.content_cache import SiteContentCache
from app.api.v1.router import api_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================================
# Application Lifespan Events
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Startup:
    - Check database connection
    - Create the site content cache (filled on first read)
    """
    # ========== STARTUP ==========
    logger.info(f"Starting {settings.PROJECT_NAME}...")
    logger.info(f"Debug mode: {settings.DEBUG}")

    db_healthy = await check_db_connection()
    if db_healthy:
        logger.info("Database connection established successfully")
    else:
        logger.warning("Database connection check failed")

    if not getattr(app.state, "content_cache", None):
        app.state.content_cache = SiteContentCache(AsyncSessionLocal)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")


# ============================================================
# Create FastAPI Application
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    ExpertGate API

    Features:
    - Password reset by emailed 6-digit code
    - Expert onboarding and support notifications
    - Profile-gated home routing
    - Site content served from a changefeed-backed cache
    """,
    version="1.0.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ----------------------------------------------------
# Middleware Configuration
# ----------------------------------------------------
# Browser clients call from any origin; preflight OPTIONS is answered here
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-webhook-secret"],
)

if settings.DEBUG:
    app.add_middleware(LoggingMiddleware)


# ----------------------------------------------------
# Health Check Endpoints
# ----------------------------------------------------
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.DEBUG else "disabled"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    db_healthy = await check_db_connection()

    if not db_healthy:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected"}
        )

    return {"status": "healthy", "database": "connected"}


# ============================================================
# Include API Router
# ============================================================
app.include_router(
    api_router,
    prefix=settings.API_V1_PREFIX
)


# ----------------------------------------------------
# Exception Handlers
# ----------------------------------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render domain errors with their client-safe message."""
    if exc.status_code >= 500:
        logger.error(
            f"{exc.__class__.__name__} on {request.url.path}",
            extra={"path": request.url.path, "cause": repr(exc.__cause__)},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message}
    )


def _field_label(loc) -> str:
    # loc looks like ("body", "newPassword")
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) if parts else "body"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed fields are client errors (400)."""
    errors = exc.errors()
    missing = [_field_label(e["loc"]) for e in errors if e.get("type") == "missing"]

    if missing:
        label = ", ".join(missing)
        verb = "is" if len(missing) == 1 else "are"
        message = f"{label[0].upper()}{label[1:]} {verb} required"
    elif errors:
        first = errors[0]
        message = f"{_field_label(first['loc'])}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message}
    )


@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 errors."""
    return JSONResponse(
        status_code=404,
        content={"error": "Not found"}
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Log the detail server-side; the caller only sees a generic message."""
    logger.exception(f"Internal server error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )
