"""FastAPI application factory and CLI entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cableindex.config import init_settings
from cableindex.core.database import close_db, get_session_factory, init_db
from cableindex.core.errors import CableIndexError
from cableindex.routers import (
    catalog_router,
    labels_router,
    locations_router,
    sids_router,
    sites_router,
)
from cableindex.services import LifecycleService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting CableIndex...")

    # Initialize database
    await init_db()
    logger.info("Database initialized")

    # Ensure sites from config exist in DB
    settings = app.state.settings
    if settings.sites:
        lifecycle = LifecycleService(get_session_factory(), settings)
        await lifecycle.ensure_sites(settings.sites)
    logger.info(f"Ensured {len(settings.sites)} sites from config")

    yield

    # Cleanup
    await close_db()
    logger.info("CableIndex shutdown complete")


async def cableindex_error_handler(request: Request, exc: CableIndexError) -> JSONResponse:
    """Render domain errors as JSON with their HTTP status."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(config_dir: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_dir: Path to configuration directory

    Returns:
        Configured FastAPI application
    """
    # Initialize settings
    settings = init_settings(config_dir)

    # Create app
    app = FastAPI(
        title="CableIndex",
        description="Site-scoped cable labels, locations and device inventory",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings in app state
    app.state.settings = settings

    app.add_exception_handler(CableIndexError, cableindex_error_handler)

    # Include routers
    app.include_router(sites_router)
    app.include_router(locations_router)
    app.include_router(catalog_router)
    app.include_router(labels_router)
    app.include_router(sids_router)

    return app


def cli():
    """CLI entry point for running the server."""
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="CableIndex - cable label and inventory service")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config"),
        help="Path to configuration directory",
    )
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to bind to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = parser.parse_args()

    # Create app with config
    app = create_app(args.config)
    settings = app.state.settings

    # Override settings from CLI
    if args.debug:
        settings.server.debug = True
        logging.getLogger().setLevel(logging.DEBUG)

    uvicorn.run(
        app,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
    )


if __name__ == "__main__":
    cli()
