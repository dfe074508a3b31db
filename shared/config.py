"""
Shared configuration management for fetch-cache.
"""

from typing import Dict, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="FETCH_CACHE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Store
    redis_url: str = Field(default="redis://localhost:6379/0")
    high_water: int = Field(default=1000, gt=0)

    # Caching behaviour
    namespace: str = Field(default="TL")
    strategy: str = Field(default="readthrough")
    default_ttl: int = Field(default=300, gt=0)
    host_ttls: Dict[str, int] = Field(default_factory=dict)
    refresh_identical: bool = Field(default=False)

    # Upstream
    upstream_timeout: float = Field(default=10.0, gt=0)

    def ttl_config(self) -> Union[int, Dict[str, int]]:
        """TTL setting in the shape the decorator expects."""
        if not self.host_ttls:
            return self.default_ttl
        ttls = dict(self.host_ttls)
        ttls.setdefault("default", self.default_ttl)
        return ttls


def get_config(**overrides) -> BaseConfig:
    """Load configuration from the environment."""
    return BaseConfig(**overrides)
