"""
Body Composition Engine — Main Application Entry Point
========================================================
This is the FastAPI application factory. It:
  1. Creates the FastAPI app instance with metadata
  2. Registers the API routers
  3. Configures CORS middleware for frontend integration
  4. Provides health check endpoints

The engine is stateless: there is no database to open or close, so the
lifespan hook only logs startup and shutdown.

To run locally:
  uvicorn bodycomp.main:app --reload --host 0.0.0.0 --port 8000 --app-dir back-end
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bodycomp.core.config import settings
from bodycomp.routers import body_composition

# Configure logging so we can see what's happening in the console
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================
# APPLICATION LIFESPAN (Startup / Shutdown)
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    logger.info(
        f"📏 Plausible body fat band: "
        f"{settings.PLAUSIBLE_FAT_MIN_PERCENT}–{settings.PLAUSIBLE_FAT_MAX_PERCENT}%"
    )

    yield  # Application is running — handle requests

    logger.info(f"🛑 Shutting down {settings.APP_NAME}...")


# ============================================================
# CREATE THE FASTAPI APPLICATION
# ============================================================
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Body composition engine for physical assessments. "
        "Estimates body density, body fat percentage and lean/fat mass "
        "from skinfold measurements (Pollock 3, Pollock 7 and Guedes protocols)."
    ),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# CORS MIDDLEWARE
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# REGISTER ROUTERS
# ============================================================
app.include_router(body_composition.router)    # /body-composition/*


# ============================================================
# ROOT / HEALTH CHECK ENDPOINT
# ============================================================
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint — serves as a health check.
    Returns basic app info to confirm the API is running.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for Docker/Kubernetes health checks.
    Returns 200 if the application is running.
    """
    return {"status": "ok"}
