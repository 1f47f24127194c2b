import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by FOUNDRELAY_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("FOUNDRELAY_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "foundrelay"
    version: str = "0.1.0"
    description: str = "Relay for found game servers with a short-lived query API"
    host: str = "0.0.0.0"
    port: int = 3000


class AuthConfig(BaseModel):
    """Shared-secret authentication.

    Every route except health needs the X-API-Key header to match api_key.
    Left empty, those routes answer 503 until it is configured.
    """

    api_key: str = ""


class StoreConfig(BaseModel):
    """Ephemeral store timing, in milliseconds."""

    ttl_ms: int = Field(300_000, gt=0)  # Lifetime of each found server
    sweep_interval_ms: int = Field(30_000, gt=0)  # Period of the expiry sweeper


class NotifierConfig(BaseModel):
    """Webhook sink for new-server notifications. Empty URL disables it."""

    webhook_url: str = ""
    username: str = "JX-NOTIFIER"
    timeout_seconds: float = Field(5.0, gt=0)  # Hard bound per delivery
    drain_timeout_seconds: float = 5.0  # Wait for in-flight deliveries on shutdown


class RateLimitConfig(BaseModel):
    """Per-client sliding window applied to the authenticated API."""

    enabled: bool = True
    max_requests: int = Field(60, gt=0)
    window_seconds: float = Field(60.0, gt=0)
    # Key clients by the first X-Forwarded-For hop; only behind a trusted proxy
    trust_forwarded: bool = False


class CorsConfig(BaseModel):
    allow_origins: list[str] = ["*"]


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from FOUNDRELAY_LOG_FILE env var."""
        return os.environ.get("FOUNDRELAY_LOG_FILE")


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    server: Server = Server()
    auth: AuthConfig = AuthConfig()
    store: StoreConfig = StoreConfig()
    notifier: NotifierConfig = NotifierConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    cors: CorsConfig = CorsConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "env_prefix": "FOUNDRELAY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows FOUNDRELAY_AUTH__API_KEY override
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - FOUNDRELAY_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def warn_on_missing_settings(config: Config) -> list[str]:
    """Log a warning for every optional-but-expected setting left empty.

    Returns the warnings so callers (and tests) can inspect them.
    """
    warnings: list[str] = []
    if not config.notifier.webhook_url:
        warnings.append(
            "FOUNDRELAY_NOTIFIER__WEBHOOK_URL not set; new servers will not be relayed"
        )
    if not config.auth.api_key:
        warnings.append(
            "FOUNDRELAY_AUTH__API_KEY not set; authenticated routes will reject every request"
        )
    for message in warnings:
        logger.warning(message)
    return warnings


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup, before other modules
    are imported to ensure all loggers pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
