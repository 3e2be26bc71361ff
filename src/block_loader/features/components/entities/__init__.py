"""Component entities - data model, configuration and protocols."""

from .config import LoaderConfig
from .models import (
    CacheEntry,
    ComponentSourceResponse,
    ExecutableComponent,
    LoadState,
    PreloadReport,
    build_cache_key,
)
from .protocols import ComponentCompiler, ComponentSourceFetcher

__all__ = [
    "LoaderConfig",
    "CacheEntry",
    "ComponentSourceResponse",
    "ExecutableComponent",
    "LoadState",
    "PreloadReport",
    "build_cache_key",
    "ComponentCompiler",
    "ComponentSourceFetcher",
]
