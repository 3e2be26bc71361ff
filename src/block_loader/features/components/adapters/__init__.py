"""Component adapters - cache, HTTP fetcher, compiler and rendering primitives."""

from .memory_cache import ComponentCache
from .http_fetcher import HttpComponentFetcher
from .python_compiler import PythonSourceCompiler
from .hooks import (
    ComponentInstance,
    Ref,
    use_state,
    use_effect,
    use_ref,
    use_memo,
    use_callback,
    RENDER_PRIMITIVES,
)

__all__ = [
    "ComponentCache",
    "HttpComponentFetcher",
    "PythonSourceCompiler",
    "ComponentInstance",
    "Ref",
    "use_state",
    "use_effect",
    "use_ref",
    "use_memo",
    "use_callback",
    "RENDER_PRIMITIVES",
]
