"""Block Loader - runtime loading and caching of page-builder block components.

Fetches component source from the component endpoint, materializes it into
a callable, caches the result with a TTL and exposes lifecycle-bound
bindings for views.
"""

from .__version__ import __version__

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .config import (
    Environment,
    LoaderSettings,
    DEVELOPMENT_CONFIG,
    PRODUCTION_CONFIG,
    TEST_CONFIG,
    get_environment_config,
)

from .core import (
    BlockLoaderError,
    ConfigurationError,
    ComponentFetchError,
    ComponentSourceError,
    MaterializationError,
    OperationCancelledError,
    ComponentLoadError,
    create_error_response,
    CancellationToken,
)

from .features.components import (
    CacheEntry,
    ComponentCompiler,
    ComponentSourceFetcher,
    ComponentSourceResponse,
    ExecutableComponent,
    LoadState,
    LoaderConfig,
    PreloadReport,
    build_cache_key,
    ComponentCache,
    ComponentInstance,
    HttpComponentFetcher,
    PythonSourceCompiler,
    Ref,
    BindingSnapshot,
    ComponentBinding,
    ComponentLoader,
    ComponentPreloader,
    PreloadBinding,
    PreloadSnapshot,
)

from .factory import create_loader, configure_from_environment

__all__ = [
    "__version__",
    "setup_logging",

    # Configuration
    "Environment",
    "LoaderSettings",
    "DEVELOPMENT_CONFIG",
    "PRODUCTION_CONFIG",
    "TEST_CONFIG",
    "get_environment_config",
    "LoaderConfig",

    # Errors
    "BlockLoaderError",
    "ConfigurationError",
    "ComponentFetchError",
    "ComponentSourceError",
    "MaterializationError",
    "OperationCancelledError",
    "ComponentLoadError",
    "create_error_response",
    "CancellationToken",

    # Data model and protocols
    "CacheEntry",
    "ComponentCompiler",
    "ComponentSourceFetcher",
    "ComponentSourceResponse",
    "ExecutableComponent",
    "LoadState",
    "PreloadReport",
    "build_cache_key",

    # Adapters
    "ComponentCache",
    "ComponentInstance",
    "HttpComponentFetcher",
    "PythonSourceCompiler",
    "Ref",

    # Services
    "BindingSnapshot",
    "ComponentBinding",
    "ComponentLoader",
    "ComponentPreloader",
    "PreloadBinding",
    "PreloadSnapshot",

    # Wiring
    "create_loader",
    "configure_from_environment",
]
