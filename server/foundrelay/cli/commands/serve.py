"""Serve command - run the API in the foreground."""

import cyclopts
import logfire
import uvicorn

from foundrelay.config import Config

app = cyclopts.App(name="serve", help="Run the HTTP API")


@app.default
def serve(host: str | None = None, port: int | None = None) -> None:
    """Start the API server.

    Args:
        host: Host to bind to. Defaults to FOUNDRELAY_SERVER__HOST.
        port: Port to listen on. Defaults to FOUNDRELAY_SERVER__PORT.
    """
    config = Config()  # type: ignore[call-arg]

    # Logfire must be configured before the app is built
    logfire.configure(
        service_name=config.server.name,
        service_version=config.server.version,
        send_to_logfire="if-token-present",
    )

    uvicorn.run(
        "foundrelay.application.api.rest.app:create_app",
        factory=True,
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,  # configure_logging owns the root logger
    )
