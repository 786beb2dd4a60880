"""aiprobe FastAPI Application.

Main entry point for the aiprobe detection API.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aiprobe import __version__
from aiprobe.config import get_settings
from aiprobe.api.routes import router


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting aiprobe server...")
    settings = get_settings()
    logger.info(f"Fusion preset: {settings.fusion_preset}, language: {settings.language}")
    if settings.oracle_enabled:
        logger.info(f"Oracle: {settings.oracle_backend} at {settings.oracle_base_url}")
    else:
        logger.info("Oracle disabled, local analyzers only")

    yield

    # Shutdown
    logger.info("Shutting down aiprobe server...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    get_settings()  # Fails closed on inconsistent weights

    app = FastAPI(
        title="aiprobe - Composite AI-Text Detector",
        description="Multi-signal estimate of whether a text was AI-generated",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
