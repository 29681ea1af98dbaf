"""FastAPI application server.

This module contains the main FastAPI application setup and server runner.
The schema is bootstrapped while the application is created, so the store is
ready before uvicorn accepts the first connection.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI  # type: ignore[import-untyped]

from time_tracker import __description__, __version__
from time_tracker.api.middleware import setup_middleware
from time_tracker.core.config import ConfigManager, configure_logging
from time_tracker.core.storage import Gateway, SQLiteGateway

logger = logging.getLogger(__name__)

# Config file handed to the reloader factory, which runs in a child process
CONFIG_ENV = "TIME_TRACKER_CONFIG"


def create_app(
    config: Optional[ConfigManager] = None, gateway: Optional[Gateway] = None
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Optional configuration manager (creates default if None)
        gateway: Optional persistence gateway (opens the configured SQLite
            database if None)

    Returns:
        Configured FastAPI application instance

    Example:
        >>> app = create_app()
        >>> # Or with an in-memory store
        >>> app = create_app(gateway=SQLiteGateway.in_memory())
    """
    if config is None:
        config = ConfigManager()

    if gateway is None:
        gateway = SQLiteGateway(config.database_url())

    # Failures here are fatal: the app must not start without its tables
    gateway.initialize()

    app = FastAPI(
        title="Time Tracker API",
        description=__description__,
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    # Store config and gateway in app state for dependency injection
    app.state.config = config
    app.state.gateway = gateway

    setup_middleware(app, config)

    from time_tracker.api.endpoints import accounts, system, tracks

    app.include_router(system.router, prefix="/api", tags=["system"])
    app.include_router(accounts.router, prefix="/api", tags=["accounts"])
    app.include_router(tracks.router, prefix="/api", tags=["tracks"])

    @app.on_event("shutdown")
    def close_gateway() -> None:
        """Close the store once the server stops accepting requests."""
        app.state.gateway.close()
        logger.info("Exited.")

    return app


def create_app_from_env() -> FastAPI:
    """Create the application from the config file named in ``TIME_TRACKER_CONFIG``.

    Used as the uvicorn factory in reload mode. Falls back to the default
    config file when the variable is unset.
    """
    config_path = os.environ.get(CONFIG_ENV)
    return create_app(ConfigManager(Path(config_path) if config_path else None))


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
    config: Optional[ConfigManager] = None,
) -> None:
    """Run the API server using Uvicorn.

    Args:
        host: Host address to bind to (default: ``api.host``)
        port: Port number to bind to (default: ``api.port``)
        reload: Enable auto-reload for development
        config: Optional configuration manager

    Note:
        This function blocks until the server is stopped. Uvicorn handles
        SIGINT and runs the shutdown hook that closes the database.
    """
    import uvicorn  # type: ignore[import-untyped]

    if config is None:
        config = ConfigManager()

    configure_logging(config)

    final_host = host or config.get("api.host", "127.0.0.1")
    final_port = port or config.get("api.port", 5540)
    logger.info(f"Time Tracker app listening on port {final_port}")

    if reload or config.get("api.advanced.reload", False):
        os.environ[CONFIG_ENV] = str(config.config_path)
        uvicorn.run(
            "time_tracker.api.server:create_app_from_env",
            factory=True,
            host=final_host,
            port=final_port,
            reload=True,
            log_level=config.get("api.advanced.log_level", "info"),
            access_log=config.get("api.advanced.access_log", True),
        )
        return

    uvicorn.run(
        create_app(config),
        host=final_host,
        port=final_port,
        log_level=config.get("api.advanced.log_level", "info"),
        access_log=config.get("api.advanced.access_log", True),
    )
