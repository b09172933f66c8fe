# pyright: reportMissingTypeStubs=false
"""
Clinic Scheduling Backend API

A FastAPI application exposing partner availability management and
appointment booking with conflict resolution.

Features:
- Weekly partner schedules with lunch breaks
- Blocked dates (full-day or partial)
- Availability checks with alternative time suggestions
- Appointment booking, rescheduling and cancellation
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import appointments, partners
from core.constants import CORS_ORIGINS
from core.exceptions import FormatError, NotFoundError, SchedulingConflict, ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)
logger.info("🏥 Clinic Scheduling API starting...")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting Clinic Scheduling Backend API")
    yield
    logger.info("🛑 Shutting down Clinic Scheduling Backend API")


# Create FastAPI application
app = FastAPI(
    title="Clinic Scheduling Backend",
    description="Partner availability and appointment conflict resolution",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(
    partners.router,
    prefix="/api",
    tags=["partners"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    appointments.router,
    prefix="/api",
    tags=["appointments"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Resource not found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal server error"},
    },
)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Clinic Scheduling Backend API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Domain exception handlers
@app.exception_handler(FormatError)
async def format_error_handler(request: Request, exc: FormatError):
    """Malformed time or date in the request."""
    logger.info(f"FormatError: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "type": "format_error", "field": exc.field},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Invalid availability or block definition."""
    logger.info(f"ValidationError: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "type": "validation_error"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"NotFoundError: {exc.message}")
    return JSONResponse(
        status_code=404,
        content={"detail": exc.message, "type": "not_found"},
    )


@app.exception_handler(SchedulingConflict)
async def scheduling_conflict_handler(request: Request, exc: SchedulingConflict):
    """Booking rejected; every conflict and the alternative start times are returned."""
    logger.warning(f"Scheduling conflict: {exc.conflicts}")
    return JSONResponse(
        status_code=409,
        content={
            "detail": exc.message,
            "type": "scheduling_conflict",
            "conflicts": exc.conflicts,
            "suggested_times": exc.suggested_times,
        },
    )


# Global exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Erro interno do servidor", "type": "internal_error"},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions."""
    logger.warning(f"ValueError: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"},
    )
