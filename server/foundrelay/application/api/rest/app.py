import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foundrelay.application.api.v1.errors import map_relay_error
from foundrelay.application.api.v1.routes import health, notify, servers, stats
from foundrelay.application.di import create_container
from foundrelay.config import Config, configure_logging, warn_on_missing_settings
from foundrelay.domain.shared.error import RelayError
from foundrelay.infrastructure.expiry.sweeper import ExpirySweeper
from foundrelay.infrastructure.notify.relay import NotificationRelay
from foundrelay.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container

    try:
        relay = await container.get(NotificationRelay)
        sweeper = await container.get(ExpirySweeper)

        # Relay closes last so deliveries spawned during shutdown still drain
        async with relay, sweeper:
            logger.info("All services started")
            yield
    finally:
        await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)
    warn_on_missing_settings(config)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    # Setup dependency injection
    container = create_container(config)
    setup_dishka(container, app_instance)

    app_instance.include_router(health.router, prefix=API_PREFIX)
    app_instance.include_router(notify.router, prefix=API_PREFIX)
    app_instance.include_router(servers.router, prefix=API_PREFIX)
    app_instance.include_router(stats.router, prefix=API_PREFIX)

    # Global error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        http_exc = map_relay_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
            headers=http_exc.headers,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
