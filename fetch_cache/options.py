"""
Immutable decorator configuration.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError, field_validator

from shared.config import BaseConfig
from shared.errors import ConfigError
from .store.base import BaseStore
from .store.redis_store import RedisStore
from .ttl import DEFAULT_TTL

STRATEGIES = ("readthrough", "race")


class CacheOptions(BaseModel):
    """Configuration bound to a cached fetch at construction.

    Attributes:
        store: Key-value store entries are cached in.
        ttl: Flat expiry in seconds, or ``{hostname: seconds, "default": seconds}``.
        strategy: ``readthrough`` or ``race``.
        namespace: Key prefix separating decorators that share a store.
        refresh_identical: Race only; rewrite entries whose bytes did not
            change so their TTL is refreshed.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    store: BaseStore
    ttl: Union[StrictInt, Mapping[str, StrictInt]] = DEFAULT_TTL
    strategy: str = "readthrough"
    namespace: str = "TL"
    refresh_identical: bool = False

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ConfigError(f"Invalid cache options: {errors[0]['message']}", details={"errors": errors})

    @field_validator("ttl")
    @classmethod
    def _check_ttl(cls, value):
        if isinstance(value, int):
            if value <= 0:
                raise ValueError("No expires option set")
            return value
        if any(seconds < 0 for seconds in value.values()):
            raise ValueError("TTL values must not be negative")
        return MappingProxyType(dict(value))

    @field_validator("strategy")
    @classmethod
    def _check_strategy(cls, value):
        if value not in STRATEGIES:
            raise ValueError(f"Invalid value for strategy {value}")
        return value

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value):
        if not value:
            raise ValueError("No namespace provided")
        return value

    @classmethod
    def from_config(cls, config: BaseConfig, store: Optional[BaseStore] = None) -> "CacheOptions":
        """Build options from settings, connecting to ``redis_url`` if no store is given."""
        if store is None:
            store = RedisStore.from_url(config.redis_url, high_water=config.high_water)
        return cls(
            store=store,
            ttl=config.ttl_config(),
            strategy=config.strategy,
            namespace=config.namespace,
            refresh_identical=config.refresh_identical,
        )
