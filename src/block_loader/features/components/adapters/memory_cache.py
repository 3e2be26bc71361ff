"""In-memory component cache with lazy TTL expiry."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from ..entities.models import CacheEntry, ExecutableComponent

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class ComponentCache:
    """Keyed store of loaded components.

    Expiry is enforced on read: ``get`` and ``has`` delete an expired entry
    before reporting it absent. ``sweep`` is an optional eager pass.
    All operations are synchronous; callers run on a single event loop.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, CacheEntry] = {}
        self.ttl = ttl
        self._clock = clock

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock(), self.ttl):
            del self._entries[key]
            logger.debug(f"Cache entry {key} expired")
            return None

        return entry

    def get(self, key: str) -> Optional[ExecutableComponent]:
        """Get a live component or None."""
        entry = self._live_entry(key)
        return entry.component if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        return self._live_entry(key)

    def set(self, key: str, component: ExecutableComponent) -> None:
        """Store ``component``, replacing any previous entry for ``key``."""
        self._entries[key] = CacheEntry(
            component=component,
            identifier=key,
            loaded_at=self._clock(),
        )

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns whether one was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now, self.ttl)]

        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        return {
            "size": len(self._entries),
            "identifiers": list(self._entries.keys()),
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def keys(self) -> List[str]:
        return list(self._entries.keys())
