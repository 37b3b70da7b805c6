"""Configuration models for the retrying HTTP client."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from retryhttp.client.constants import (
    DEFAULT_IDLE_TIMEOUT_SECONDS,
    DEFAULT_MAX_IDLE_CONNECTIONS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_RETRY_MAX,
    DEFAULT_RETRY_WAIT_MAX_SECONDS,
    DEFAULT_RETRY_WAIT_MIN_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_MAX,
    HTTP_STATUS_MIN,
    NO_STATUS,
)
from retryhttp.client.models import DEFAULT_BACKOFF_STRATEGY, BackoffKind


class ClientConfig(BaseModel):
    """Configuration for the retrying HTTP client.

    Immutable once built. Every field has an independent default; the
    backoff map is merged over ``DEFAULT_BACKOFF_STRATEGY`` unless
    ``inherit_default_backoff`` is False, in which case it replaces it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_seconds: Annotated[float, Field(gt=0.0)] = DEFAULT_TIMEOUT_SECONDS
    retry_max: Annotated[int, Field(ge=0)] = DEFAULT_RETRY_MAX
    retry_wait_min_seconds: Annotated[float, Field(ge=0.0)] = (
        DEFAULT_RETRY_WAIT_MIN_SECONDS
    )
    retry_wait_max_seconds: Annotated[float, Field(ge=0.0)] = (
        DEFAULT_RETRY_WAIT_MAX_SECONDS
    )
    max_response_size_bytes: Annotated[int, Field(ge=0)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    max_idle_connections: Annotated[int, Field(ge=0)] = DEFAULT_MAX_IDLE_CONNECTIONS
    idle_timeout_seconds: Annotated[float, Field(gt=0.0)] = (
        DEFAULT_IDLE_TIMEOUT_SECONDS
    )
    trust_env: bool = Field(
        default=True,
        description="Resolve proxies and certificates from the environment",
    )
    backoff_strategy: dict[int, BackoffKind] = Field(
        default_factory=lambda: dict(DEFAULT_BACKOFF_STRATEGY),
        description="Status code to backoff strategy; absent codes are never retried",
    )
    inherit_default_backoff: bool = Field(
        default=True,
        description="Merge backoff_strategy over the default map instead of replacing it",
    )

    @field_validator("backoff_strategy")
    @classmethod
    def validate_status_codes(
        cls, v: dict[int, BackoffKind]
    ) -> dict[int, BackoffKind]:
        """Ensure every key is an HTTP status code or the no-status key."""
        for status_code in v:
            if status_code == NO_STATUS:
                continue
            if not HTTP_STATUS_MIN <= status_code <= HTTP_STATUS_MAX:
                msg = (
                    f"Invalid status code {status_code}: "
                    f"must be {HTTP_STATUS_MIN}-{HTTP_STATUS_MAX} or {NO_STATUS}"
                )
                raise ValueError(msg)
        return v

    @model_validator(mode="before")
    @classmethod
    def merge_default_backoff(cls, data: Any) -> Any:
        """Merge user backoff overrides over the default map."""
        if not isinstance(data, dict):
            return data
        overrides = data.get("backoff_strategy")
        if overrides is None or not data.get("inherit_default_backoff", True):
            return data
        merged: dict[Any, Any] = dict(DEFAULT_BACKOFF_STRATEGY)
        merged.update(overrides)
        return {**data, "backoff_strategy": merged}

    @model_validator(mode="after")
    def validate_wait_bounds(self) -> "ClientConfig":
        """Ensure retry_wait_min_seconds <= retry_wait_max_seconds."""
        if self.retry_wait_min_seconds > self.retry_wait_max_seconds:
            msg = (
                f"retry_wait_min_seconds ({self.retry_wait_min_seconds}) must not "
                f"exceed retry_wait_max_seconds ({self.retry_wait_max_seconds})"
            )
            raise ValueError(msg)
        return self

    def strategy_for(self, status_code: int) -> BackoffKind | None:
        """Get the backoff strategy configured for a status code.

        Args:
            status_code: HTTP status code, or NO_STATUS for transport errors.

        Returns:
            Configured BackoffKind, or None if the code is not retriable.
        """
        return self.backoff_strategy.get(status_code)

    def with_backoff(self, status_code: int, kind: BackoffKind) -> "ClientConfig":
        """Return a copy with one backoff entry added or replaced.

        Args:
            status_code: HTTP status code, or NO_STATUS.
            kind: Backoff strategy for that code.

        Returns:
            New validated config.
        """
        strategy = dict(self.backoff_strategy)
        strategy[status_code] = kind
        return self.with_options(backoff_strategy=strategy)

    def with_options(self, **changes: Any) -> "ClientConfig":
        """Return a validated copy with the given fields changed.

        Args:
            **changes: Field names and new values.

        Returns:
            New validated config.
        """
        data = self.model_dump()
        data.update(changes)
        return ClientConfig.model_validate(data)
