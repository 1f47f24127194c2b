"""Global test fixtures."""

import logfire
import pytest

from foundrelay.config import Config

# Logfire must be configured before any app is built; keep it local and quiet
logfire.configure(send_to_logfire=False, console=False)

TEST_API_KEY = "test-api-key"


@pytest.fixture
def config() -> Config:
    """Config isolated from the developer's environment and .env file."""
    return Config(
        _env_file=None,  # type: ignore[call-arg]
        auth={"api_key": TEST_API_KEY},
        notifier={"webhook_url": ""},
    )
