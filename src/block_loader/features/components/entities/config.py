"""Loader configuration for block-loader."""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ....core.exceptions import ConfigurationError


class LoaderConfig(BaseModel):
    """Tunables read by every load, fetch and cache lookup.

    Durations are in seconds.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cache_enabled: bool = Field(default=True, description="Serve and store loaded components in the cache")
    cache_ttl: float = Field(default=300.0, ge=0, description="Maximum age of a cache entry in seconds")
    retry_attempts: int = Field(default=3, ge=1, description="Total fetch attempts, including the first")
    retry_delay: float = Field(default=1.0, ge=0, description="Fixed delay between attempts in seconds")
    timeout: float = Field(default=10.0, gt=0, description="Hard per-attempt request timeout in seconds")

    def merge(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "LoaderConfig":
        """Return a new config with ``changes`` applied and re-validated."""
        updates: Dict[str, Any] = dict(changes or {})
        updates.update(kwargs)
        try:
            return LoaderConfig(**{**self.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid loader configuration: {e}",
                details={"changes": updates},
            ) from e
