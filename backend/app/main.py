"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models import HealthResponse
from .routers import (
    categories_router,
    prompts_router,
    tools_router,
)
from .services import get_storage_service

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


STORAGE_MODES = ("memory", "cosmos")


def _validate_startup_configuration():
    """Validate startup configuration and fail fast on anything unusable.

    Raises:
        ValueError: On an unknown storage mode, inconsistent page sizes, or
            missing Cosmos settings in cosmos mode.
    """
    mode = settings.storage_mode.strip().lower()
    if mode not in STORAGE_MODES:
        raise ValueError(
            f"Unknown STORAGE_MODE '{settings.storage_mode}'. Expected one of: {', '.join(STORAGE_MODES)}"
        )

    if not 1 <= settings.default_page_size <= settings.max_page_size:
        raise ValueError(
            "DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE "
            f"(got {settings.default_page_size} and {settings.max_page_size})"
        )

    if not settings.is_cosmos_mode:
        return

    required_settings = [
        ("cosmos_endpoint", "COSMOS_ENDPOINT"),
        ("cosmos_key", "COSMOS_KEY"),
        ("cosmos_database", "COSMOS_DATABASE"),
        ("cosmos_container", "COSMOS_CONTAINER"),
    ]

    for attr_name, env_name in required_settings:
        value = getattr(settings, attr_name, None)
        if not value or (isinstance(value, str) and not value.strip()):
            raise ValueError(
                f"Cosmos mode requires {env_name} environment variable to be set. "
                f"Please set {env_name} in your environment or .env file."
            )

    logger.info("Cosmos mode configuration validated successfully")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    logger.info("Starting directory API...")

    _validate_startup_configuration()
    storage = get_storage_service()
    logger.info(f"Serving records from {storage.storage_mode} storage")

    yield

    # Shutdown
    logger.info("Shutting down directory API...")


# Create FastAPI application
app = FastAPI(
    title="Prompt & Tool Directory API",
    description="Catalog of prompts and AI tools with filtering, sharing and ratings",
    version="1.0.0",
    lifespan=lifespan,
)


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(prompts_router)
app.include_router(tools_router)
app.include_router(categories_router)


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", storage_mode=settings.storage_mode)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Prompt & Tool Directory API",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
