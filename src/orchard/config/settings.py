"""
Process-wide provider settings using Pydantic.

Provides environment-based configuration loading with ORCHARD_AWS_ prefix.
"""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from orchard.core.errors import ConfigurationError


class ProviderSettings(BaseSettings):
    """AWS provider settings shared by every resource adapter in the process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ORCHARD_AWS_",
        extra="ignore",
    )

    # Cluster logs
    logging_uri: str | None = None

    # AWS
    aws_region: str | None = None
    endpoint_url: str | None = None
    assume_role_arn: str | None = None
    assume_role_session_name: str = "orchard"

    # Retry policy
    retry_max_attempts: int = Field(default=5, ge=1)
    retry_wait_multiplier: float = Field(default=1.0, ge=0)
    retry_wait_min: float = Field(default=1.0, ge=0)
    retry_wait_max: float = Field(default=30.0, ge=0)
    retry_max_elapsed: float | None = Field(default=None, ge=0)

    # Per-call transport timeouts (seconds)
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(default=60.0, gt=0)

    def log_uri_for(self, resource_name: str) -> str | None:
        """Log destination for a named resource, or None when logging is not configured."""
        if not self.logging_uri:
            return None
        return f"{self.logging_uri.rstrip('/')}/{resource_name}/"


@lru_cache
def get_settings() -> ProviderSettings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If the environment holds unusable provider settings.
    """
    try:
        return ProviderSettings()
    except ValidationError as exc:
        fields = sorted(
            {f"ORCHARD_AWS_{'.'.join(str(p) for p in err['loc']).upper()}" for err in exc.errors()}
        )
        raise ConfigurationError(
            f"Invalid provider settings: {', '.join(fields)}",
            {"errors": [err["msg"] for err in exc.errors()]},
        ) from exc
