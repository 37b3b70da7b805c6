"""Client settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from retryhttp.client.config import ClientConfig
from retryhttp.client.constants import (
    DEFAULT_IDLE_TIMEOUT_SECONDS,
    DEFAULT_MAX_IDLE_CONNECTIONS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_RETRY_MAX,
    DEFAULT_RETRY_WAIT_MAX_SECONDS,
    DEFAULT_RETRY_WAIT_MIN_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)
from retryhttp.client.models import BackoffKind


class ClientSettings(BaseSettings):
    """Environment configuration for the retrying client.

    Variables use the ``RETRYHTTP_`` prefix, e.g. ``RETRYHTTP_RETRY_MAX=5``.
    ``RETRYHTTP_BACKOFF_STRATEGY`` takes JSON such as
    ``{"500": "constant"}``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYHTTP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retry_max: int = DEFAULT_RETRY_MAX
    retry_wait_min_seconds: float = DEFAULT_RETRY_WAIT_MIN_SECONDS
    retry_wait_max_seconds: float = DEFAULT_RETRY_WAIT_MAX_SECONDS
    max_response_size_bytes: int = DEFAULT_MAX_RESPONSE_SIZE_BYTES
    max_idle_connections: int = DEFAULT_MAX_IDLE_CONNECTIONS
    idle_timeout_seconds: float = DEFAULT_IDLE_TIMEOUT_SECONDS
    trust_env: bool = True
    backoff_strategy: dict[int, BackoffKind] = Field(default_factory=dict)
    inherit_default_backoff: bool = True

    def to_config(self) -> ClientConfig:
        """Build a validated client configuration from these settings."""
        return ClientConfig(
            timeout_seconds=self.timeout_seconds,
            retry_max=self.retry_max,
            retry_wait_min_seconds=self.retry_wait_min_seconds,
            retry_wait_max_seconds=self.retry_wait_max_seconds,
            max_response_size_bytes=self.max_response_size_bytes,
            max_idle_connections=self.max_idle_connections,
            idle_timeout_seconds=self.idle_timeout_seconds,
            trust_env=self.trust_env,
            backoff_strategy=self.backoff_strategy,
            inherit_default_backoff=self.inherit_default_backoff,
        )


def get_settings() -> ClientSettings:
    """Get a settings instance."""
    return ClientSettings()
