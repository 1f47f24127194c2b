"""Helpers shared by commands that talk to a running server."""

import os
import sys
import time
from collections.abc import Callable
from typing import Any

import httpx

from foundrelay.cli.console import get_console


def get_server_url() -> str:
    """Get server URL from the environment."""
    return os.environ.get("FOUNDRELAY_SERVER", "http://localhost:3000")


def get_api_key() -> str:
    return os.environ.get("FOUNDRELAY_AUTH__API_KEY", "")


def with_retry[T](
    fn: Callable[[], T],
    retries: int = 3,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Retry a function on transient errors with linear backoff.

    Raises:
        The last exception if all retries fail.
    """
    last_error: Exception | None = None
    for attempt in range(retries + 1):
        try:
            return fn()
        except exceptions as e:
            last_error = e
            if attempt < retries:
                time.sleep(0.2 * (attempt + 1))  # Backoff: 0.2, 0.4, 0.6s
    raise last_error  # type: ignore[misc]


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", response.text)
    except ValueError:
        return response.text


def request_json(method: str, path: str, params: dict[str, Any] | None = None) -> Any:
    """Call ``path`` on the server with the API key; exit(1) on failure."""
    console = get_console()
    server_url = get_server_url()
    url = f"{server_url}{path}"

    try:
        response = with_retry(
            lambda: httpx.request(
                method, url, params=params, headers={"X-API-Key": get_api_key()}
            ),
            exceptions=(httpx.ReadError, httpx.ConnectError),
        )
        response.raise_for_status()
        return response.json()
    except httpx.ConnectError:
        console.error(
            f"Could not connect to server at {server_url}",
            hint="Is the server running? Start it with: foundrelay serve",
        )
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status in (401, 403):
            console.error(
                "Server rejected the API key",
                hint="Set FOUNDRELAY_AUTH__API_KEY to the server's key",
            )
        elif status == 404:
            console.error(_error_message(e.response))
        else:
            console.error(f"Server error: {status} - {_error_message(e.response)}")
        sys.exit(1)
    except httpx.ReadError:
        console.error("Connection lost while reading response")
        sys.exit(1)


def get_json(path: str, params: dict[str, Any] | None = None) -> Any:
    return request_json("GET", path, params)
