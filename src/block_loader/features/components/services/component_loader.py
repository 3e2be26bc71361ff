"""Component loader - cache lookup, fetch, materialize and store."""

import asyncio
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from ..adapters.memory_cache import ComponentCache
from ..adapters.python_compiler import PythonSourceCompiler
from ..entities.config import LoaderConfig
from ..entities.models import ExecutableComponent, PreloadReport, build_cache_key
from ..entities.protocols import ComponentCompiler, ComponentSourceFetcher
from .preloader import ComponentPreloader
from ....core.exceptions import ComponentLoadError

logger = logging.getLogger(__name__)


class ComponentLoader:
    """Loads executable components by identifier.

    The loader owns its configuration, cache and in-flight request map.
    While caching is enabled, concurrent loads of the same cache key share a
    single fetch. A failed load is never cached.

    Args:
        fetcher: Source of component text
        compiler: Turns source text into a component (defaults to the Python compiler)
        cache: Component cache (a fresh one is created when omitted)
        config: Initial configuration
    """

    def __init__(
        self,
        fetcher: ComponentSourceFetcher,
        compiler: Optional[ComponentCompiler] = None,
        cache: Optional[ComponentCache] = None,
        config: Optional[LoaderConfig] = None,
    ):
        self._config = config or LoaderConfig()
        self._fetcher = fetcher
        self._compiler = compiler or PythonSourceCompiler()
        self._cache = cache if cache is not None else ComponentCache()
        self._cache.ttl = self._config.cache_ttl
        self._pending: Dict[str, "asyncio.Task[ExecutableComponent]"] = {}
        self._preloader = ComponentPreloader(self)

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def cache(self) -> ComponentCache:
        return self._cache

    @property
    def fetcher(self) -> ComponentSourceFetcher:
        return self._fetcher

    def configure(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> LoaderConfig:
        """Merge ``changes`` into the configuration.

        Takes effect for every subsequent operation, including loads that
        are already waiting on the network.

        Raises:
            ConfigurationError: a value is invalid; the previous config is kept
        """
        self._config = self._config.merge(changes, **kwargs)
        self._cache.ttl = self._config.cache_ttl
        logger.debug(f"Loader configured: {self._config.model_dump()}")
        return self._config

    def in_flight(self) -> int:
        return len(self._pending)

    async def load(self, identifier: str, variant: Optional[str] = None) -> ExecutableComponent:
        """Load the component for ``identifier`` (optionally a variant of it).

        A cache hit returns without suspending.

        Raises:
            ComponentLoadError: fetching or materializing failed
        """
        key = build_cache_key(identifier, variant)

        if not self._config.cache_enabled:
            # Nothing is shared when caching is off; every call reaches the endpoint
            return await self._load_uncached(identifier, variant, key)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Loading {key} from cache")
            return cached

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load_uncached(identifier, variant, key))
            task.add_done_callback(_consume_exception)
            self._pending[key] = task
        else:
            logger.debug(f"Joining in-flight load of {key}")

        # A cancelled caller must not cancel the load other callers share
        return await asyncio.shield(task)

    async def _load_uncached(self, identifier: str, variant: Optional[str], key: str) -> ExecutableComponent:
        logger.info(f"Fetching {key} from component endpoint")
        try:
            response = await self._fetcher.fetch(identifier, variant, self._config)
            component = self._compiler.materialize(response.source_text, identifier)
        except ComponentLoadError as e:
            logger.error(f"Failed to load component {key}: {e.message}")
            raise
        except Exception as e:
            load_error = ComponentLoadError.from_exception(e, identifier)
            logger.error(f"Failed to load component {key}: {load_error.message}")
            raise load_error from e
        finally:
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

        if self._config.cache_enabled:
            self._cache.set(key, component)
            logger.debug(f"Cached {key}")

        return component

    async def preload(self, identifiers: Iterable[str]) -> None:
        """Warm the cache for ``identifiers``; failures are logged, never raised."""
        await self._preloader.preload(identifiers)

    async def preload_with_report(self, identifiers: Iterable[str]) -> PreloadReport:
        """Like ``preload`` but return which identifiers loaded and which failed."""
        return await self._preloader.preload_with_report(identifiers)

    def is_cached(self, identifier: str, variant: Optional[str] = None) -> bool:
        return self._cache.has(build_cache_key(identifier, variant))

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Component cache cleared")

    def cache_stats(self) -> Dict[str, Any]:
        return self._cache.stats()

    def sweep_cache(self) -> int:
        return self._cache.sweep()

    async def invalidate(
        self,
        identifier: str,
        variant: Optional[str] = None,
        remote: bool = False,
    ) -> bool:
        """Drop the local cache entry, and the server's copy when ``remote`` is set.

        Returns whether a local entry was removed.
        """
        removed = self._cache.delete(build_cache_key(identifier, variant))

        if remote:
            ack = await self._fetcher.invalidate(identifier, self._config)
            logger.info(f"Remote invalidation of {identifier}: {ack}")

        return removed

    async def aclose(self) -> None:
        close = getattr(self._fetcher, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "ComponentLoader":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _consume_exception(task: "asyncio.Future[Any]") -> None:
    # Every caller may have been cancelled; keep asyncio from reporting the error as unretrieved
    if not task.cancelled():
        task.exception()
