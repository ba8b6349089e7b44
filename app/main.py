# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Memory Wall API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    MemoryWallException,
    http_exception_handler,
    memory_wall_exception_handler,
    validation_exception_handler,
)
from app.routers import health, memory_wall
from app.routers.health import API_VERSION

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info(f"Starting Memory Wall API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Photo limits: {settings.MAX_IMAGE_SIZE} bytes, "
        f"types={settings.allowed_image_extensions_list}"
    )

    yield

    logger.info("Shutting down Memory Wall API")


# Create FastAPI application
app = FastAPI(
    title="Memory Wall API",
    description="""
## Student Memory Wall

Students keep a wall of photos from college life. Each memory is a photo
with a title, a date and an optional description, scoped to the student
and their college.

### Quick Start

```bash
# Create a memory
curl -X POST http://localhost:8000/api/v1/memory-wall \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "photo=@trip.jpg" -F "title=Field Trip" -F "date=2024-03-14"

# List memories matching "trip"
curl "http://localhost:8000/api/v1/memory-wall?search=trip" \\
  -H "Authorization: Bearer $TOKEN"
```

Every response uses the envelope `{"success", "message", "data"}`.
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Memory Wall",
            "description": "Create, browse, edit and delete photo memories",
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

app.add_exception_handler(MemoryWallException, memory_wall_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    memory_wall.router,
    prefix="/api/v1/memory-wall",
    tags=["Memory Wall"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Memory Wall API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
