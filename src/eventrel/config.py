"""Configuration management for the Eventrel client."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from eventrel.exceptions import ConfigurationError


DEFAULT_BASE_URL = "https://api.eventrel.sh"
DEFAULT_API_VERSION = "v1"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Eventrel client settings.

    All values can be supplied through ``EVENTREL_*`` environment variables
    or a ``.env`` file.

    Attributes:
        api_token: Team-scoped API token. Required to talk to the API.
        api_version: API version path segment appended to the base URL.
        base_url: Base URL of the Eventrel API.
        timeout: HTTP request timeout in seconds.
        log_level: Logging level used by ``configure_logging``.
        log_format: Log output format.
    """

    api_token: str | None = Field(
        default=None,
        description="Team-scoped Eventrel API token",
    )
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        min_length=1,
        description="API version path segment (e.g. 'v1')",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Eventrel API; change only for self-hosted installs",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    model_config = {
        "env_prefix": "EVENTREL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("api_version")
    @classmethod
    def strip_version_slashes(cls, value: str) -> str:
        """Normalize '/v1/' and 'v1' to the same segment."""
        stripped = value.strip("/")
        if not stripped:
            raise ValueError("api_version must not be empty")
        return stripped

    @field_validator("base_url")
    @classmethod
    def strip_base_url_slash(cls, value: str) -> str:
        """Drop the trailing slash so path joining stays predictable."""
        return value.rstrip("/")

    def require_api_token(self) -> str:
        """Return the API token or fail loudly.

        Raises:
            ConfigurationError: If no token is configured.
        """
        if not self.api_token:
            raise ConfigurationError(
                "EVENTREL_API_TOKEN must be set. You can find your token in the "
                "Eventrel dashboard under Settings -> API Tokens."
            )
        return self.api_token


# Global settings instance
settings = Settings()
