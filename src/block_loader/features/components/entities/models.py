"""Data model for dynamically loaded block components."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ....core.exceptions import ComponentLoadError

# Opaque callable produced by a compiler; nothing outside the compiler inspects it
ExecutableComponent = Callable[..., Any]

VARIANT_SEPARATOR = ":"


def build_cache_key(identifier: str, variant: Optional[str] = None) -> str:
    """Cache identity of a component: ``<identifier>`` or ``<identifier>:<variant>``."""
    return f"{identifier}{VARIANT_SEPARATOR}{variant}" if variant else identifier


class LoadState(str, Enum):
    """Consumer-facing state of a component load."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class CacheEntry:
    """Loaded component plus the monotonic time it was stored."""
    component: ExecutableComponent
    identifier: str
    loaded_at: float

    def age(self, now: float) -> float:
        return now - self.loaded_at

    def is_expired(self, now: float, ttl: float) -> bool:
        # A zero TTL never serves a hit
        return self.age(now) >= ttl


class ComponentSourceResponse(BaseModel):
    """Body returned by ``GET <root>/<identifier>``.

    Also accepts the legacy field names ``code``, ``blockType`` and
    ``timestamp``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool
    source_text: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceText", "source_text", "code"),
    )
    identifier: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("identifier", "blockType"),
    )
    error: Optional[str] = None
    served_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("servedAt", "served_at", "timestamp"),
    )
    cached: Optional[bool] = None


@dataclass
class PreloadReport:
    """Partition of a preload batch into loaded and failed identifiers."""
    loaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: Dict[str, ComponentLoadError] = field(default_factory=dict)

    @property
    def all_loaded(self) -> bool:
        return not self.failed
