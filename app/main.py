# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Relif API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from app.config import settings
from app.exceptions import RelifException, relif_exception_handler
from app.routers import (
    beneficiaries,
    cases,
    health,
    housings,
    inventory,
    organizations,
    users,
    volunteers,
)
from app.auth import routes as auth_routes
from lib.fallback import status_code_of
from lib.utils import ApplicationError

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

    Runs on startup and shutdown.
    """
    logger.info(f"Starting Relif API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Legacy API fallback: {settings.LEGACY_API_URL}")

    yield

    logger.info("Shutting down Relif API")


# Create FastAPI application
app = FastAPI(
    title="Relif API",
    description="""
## Humanitarian Case Management API

Relif keeps the records of aid organizations: beneficiaries, housing and
rooms, volunteers, inventory and donations, and the cases opened for the
people they serve.

### How It Works

1. **Sign in** - `POST /api/v1/auth/sign-in` returns an access token
2. **Authenticate** - send `Authorization: Bearer <token>` on every request
3. **Work in your organization** - rows are filtered by Row Level Security
   for the caller, so each organization only sees its own records

Requests go to the hosted backend first. Selected operations fall back to
the legacy REST API when the hosted backend fails.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Sign in, sign up and token verification"},
        {"name": "Organizations", "description": "Organizations, invites and requests"},
        {"name": "Users", "description": "Organization members and platform staff"},
        {"name": "Beneficiaries", "description": "People receiving aid, allocation and history"},
        {"name": "Housings", "description": "Housings and their rooms"},
        {"name": "Cases", "description": "Cases with notes and documents"},
        {"name": "Inventory", "description": "Product types, stock and donations"},
        {"name": "Volunteers", "description": "Volunteers of an organization"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(RelifException)
async def handle_relif_exception(request: Request, exc: RelifException):
    """Handle custom Relif exceptions."""
    return await relif_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """
    Handle client-layer errors (hosted backend, Edge Functions, legacy API).

    Their status code is the upstream one when known, else 502.
    """
    status_code = getattr(exc, "status_code", None) or 502
    logger.warning(f"Upstream error on {request.url.path}: {exc.message}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(APIError)
async def handle_postgrest_error(request: Request, exc: APIError):
    """Handle PostgREST errors that reached the route unmapped."""
    status_code = status_code_of(exc) or 502
    logger.warning(f"PostgREST error on {request.url.path}: {exc.code} {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message or "Database request failed", "code": exc.code or "DATABASE_ERROR"},
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

# Entity endpoints
app.include_router(organizations.router, prefix="/api/v1", tags=["Organizations"])
app.include_router(users.router, prefix="/api/v1", tags=["Users"])
app.include_router(beneficiaries.router, prefix="/api/v1", tags=["Beneficiaries"])
app.include_router(housings.router, prefix="/api/v1", tags=["Housings"])
app.include_router(cases.router, prefix="/api/v1", tags=["Cases"])
app.include_router(inventory.router, prefix="/api/v1", tags=["Inventory"])
app.include_router(volunteers.router, prefix="/api/v1", tags=["Volunteers"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Relif API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
