"""Relay configuration settings."""

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class RelaySettings(BaseSettings):
    """Relay configuration, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to listen on")  # noqa: S104
    port: int = Field(default=3000, description="Port to listen on")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Access
    api_key: str | None = Field(
        default=None,
        description="Shared key expected in the x-api-key header (None = deny all)",
    )

    # Origins
    raw_url: str | None = Field(
        default=None,
        description="Fixed resource served on /raw",
    )
    base_repo_url: str = Field(
        default="",
        description="Base URL that /scripts/{filename} is resolved against",
    )
    allowed_ext: str = Field(
        default=".lua,.txt,.json",
        description="Comma separated list of extensions served on /scripts",
    )

    # Cache and outbound requests
    cache_ttl_ms: int = Field(
        default=60_000,
        ge=0,
        description="Cache time-to-live in milliseconds",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for origin requests in seconds",
    )
    user_agent: str = Field(default="rawrelay/1.0", description="Outbound User-Agent")
    accept: str = Field(default="text/plain, */*", description="Outbound Accept")

    @field_validator("base_repo_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def cache_ttl(self) -> float:
        """Cache TTL in seconds."""
        return self.cache_ttl_ms / 1000

    @property
    def max_age(self) -> int:
        return self.cache_ttl_ms // 1000

    @property
    def allowed_extensions(self) -> tuple[str, ...]:
        return tuple(ext.strip() for ext in self.allowed_ext.split(",") if ext.strip())
