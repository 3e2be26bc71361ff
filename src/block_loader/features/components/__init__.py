"""Component loading feature.

Feature-first layout:
- entities/: data model, loader configuration and protocols
- adapters/: memory cache, HTTP fetcher, Python compiler, rendering primitives
- services/: loader, preloader and lifecycle-bound bindings
"""

from .entities import (
    CacheEntry,
    ComponentCompiler,
    ComponentSourceFetcher,
    ComponentSourceResponse,
    ExecutableComponent,
    LoadState,
    LoaderConfig,
    PreloadReport,
    build_cache_key,
)
from .adapters import (
    ComponentCache,
    ComponentInstance,
    HttpComponentFetcher,
    PythonSourceCompiler,
    Ref,
)
from .services import (
    BindingSnapshot,
    ComponentBinding,
    ComponentLoader,
    ComponentPreloader,
    PreloadBinding,
    PreloadSnapshot,
)

__all__ = [
    "CacheEntry",
    "ComponentCompiler",
    "ComponentSourceFetcher",
    "ComponentSourceResponse",
    "ExecutableComponent",
    "LoadState",
    "LoaderConfig",
    "PreloadReport",
    "build_cache_key",
    "ComponentCache",
    "ComponentInstance",
    "HttpComponentFetcher",
    "PythonSourceCompiler",
    "Ref",
    "BindingSnapshot",
    "ComponentBinding",
    "ComponentLoader",
    "ComponentPreloader",
    "PreloadBinding",
    "PreloadSnapshot",
]
