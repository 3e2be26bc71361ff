"""Protocols for the component loading pipeline.

The loader depends only on these seams so the HTTP fetcher and the Python
compiler can be swapped for test doubles or other transports.
"""

from abc import abstractmethod
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .config import LoaderConfig
from .models import ComponentSourceResponse, ExecutableComponent


@runtime_checkable
class ComponentSourceFetcher(Protocol):
    """Retrieves component source text from a remote endpoint."""

    @abstractmethod
    async def fetch(
        self,
        identifier: str,
        variant: Optional[str] = None,
        config: Optional[LoaderConfig] = None,
    ) -> ComponentSourceResponse:
        """Fetch source for ``identifier`` honouring the timeout and retry policy."""
        ...

    @abstractmethod
    async def invalidate(
        self,
        identifier: str,
        config: Optional[LoaderConfig] = None,
    ) -> Dict[str, Any]:
        """Ask the endpoint to drop its cached source for ``identifier``."""
        ...


@runtime_checkable
class ComponentCompiler(Protocol):
    """Turns source text into an executable component."""

    @abstractmethod
    def materialize(self, source_text: str, identifier: str) -> ExecutableComponent:
        """Evaluate ``source_text`` and return the single component it exports."""
        ...
