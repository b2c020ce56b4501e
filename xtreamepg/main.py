"""
XtreamEPG Main Application

FastAPI application entry point serving the addon protocol.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from xtreamepg import __version__
from xtreamepg.config import load_config, validate_config
from xtreamepg.service import AddonService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup loads and validates configuration (missing provider
    credentials abort startup), builds the service and schedules the
    EPG refresh. Shutdown stops the scheduler.
    """
    logger.info(f"Starting XtreamEPG v{__version__}")

    service: Optional[AddonService] = getattr(app.state, "service", None)
    if service is None:
        config = load_config()
        validate_config(config)
        service = AddonService(config)
        app.state.service = service

    await service.start()
    logger.info(f"Add-on server ready on port {service.config.server.port}")

    yield

    logger.info("Shutting down XtreamEPG")
    try:
        await service.stop()
    except Exception as e:
        logger.warning(f"Error stopping service: {e}")
    logger.info("XtreamEPG shutdown complete")


def create_app(service: Optional[AddonService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Pre-built service; when omitted one is built from the
            loaded configuration at startup.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="XtreamEPG",
        description="IPTV addon exposing an Xtream Codes provider with optional EPG",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url=None,
    )
    app.state.service = service

    # Addon hosts fetch from arbitrary origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    from xtreamepg.api import addon_router, health_router
    app.include_router(addon_router)
    app.include_router(health_router)

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/manifest.json")

    return app


app = create_app()


def main() -> None:
    """
    Main entry point for running the server.

    Called via the `xtreamepg` console script or `python -m xtreamepg`.
    """
    import uvicorn
    from xtreamepg.config import ConfigurationError
    from xtreamepg.utils.logging_setup import parse_size, setup_logging

    config = load_config()

    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=True,
        log_to_file=config.logging.to_file,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    try:
        validate_config(config)
    except ConfigurationError as e:
        logger.critical(str(e))
        raise SystemExit(1) from e

    uvicorn.run(
        "xtreamepg.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
