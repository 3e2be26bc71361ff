"""Lifecycle-bound consumers of the component loader.

A binding belongs to a view. It drives ``idle -> loading -> success|error``
for its current identifier and stops applying results once the view is torn
down or the identifier changes. Each load captures its own cancellation
token when it starts and checks it after the await, never shared state.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

from ..entities.models import ExecutableComponent, LoadState
from ....core.cancellation import CancellationToken
from ....core.exceptions import ComponentLoadError

if TYPE_CHECKING:
    from .component_loader import ComponentLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindingSnapshot:
    """State of a ComponentBinding after a change."""
    identifier: str
    state: LoadState
    component: Optional[ExecutableComponent] = None
    error: Optional[ComponentLoadError] = None


class ComponentBinding:
    """Loads one component on behalf of a mounted view.

    Args:
        loader: Loader used for every request
        identifier: Component to load
        variant: Optional variant of the component
        on_change: Receives a snapshot after every applied state change
    """

    def __init__(
        self,
        loader: "ComponentLoader",
        identifier: str,
        variant: Optional[str] = None,
        on_change: Optional[Callable[[BindingSnapshot], None]] = None,
    ):
        self._loader = loader
        self._identifier = identifier
        self._variant = variant
        self._on_change = on_change
        self._mounted = False
        self._token: Optional[CancellationToken] = None
        self._task: Optional["asyncio.Task[None]"] = None

        self.state = LoadState.IDLE
        self.component: Optional[ExecutableComponent] = None
        self.error: Optional[ComponentLoadError] = None

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def variant(self) -> Optional[str]:
        return self._variant

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def task(self) -> Optional["asyncio.Task[None]"]:
        return self._task

    def snapshot(self) -> BindingSnapshot:
        return BindingSnapshot(
            identifier=self._identifier,
            state=self.state,
            component=self.component,
            error=self.error,
        )

    def mount(self) -> "asyncio.Task[None]":
        """Attach to the view and start loading the current identifier."""
        if self._mounted and self._task is not None:
            return self._task
        self._mounted = True
        return self._start()

    def unmount(self) -> None:
        """Detach from the view. In-flight loads finish but are not applied."""
        self._mounted = False
        if self._token is not None:
            self._token.cancel("unmounted")

    def set_identifier(self, identifier: str, variant: Optional[str] = None) -> Optional["asyncio.Task[None]"]:
        """Switch to another component, superseding any in-flight load."""
        if identifier == self._identifier and variant == self._variant:
            return None
        self._identifier = identifier
        self._variant = variant
        if not self._mounted:
            return None
        return self._start()

    def retry(self) -> Optional["asyncio.Task[None]"]:
        """Reset an errored binding to idle and load again."""
        if not self._mounted or self.state is not LoadState.ERROR:
            logger.debug(f"Retry ignored for {self._identifier} in state {self.state.value}")
            return None
        self._apply(state=LoadState.IDLE, error=None)
        return self._start()

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    def _start(self) -> "asyncio.Task[None]":
        if self._token is not None:
            self._token.cancel("superseded")
        token = CancellationToken()
        self._token = token

        self._apply(state=LoadState.LOADING, error=None)
        self._task = asyncio.ensure_future(self._run(self._identifier, self._variant, token))
        return self._task

    async def _run(self, identifier: str, variant: Optional[str], token: CancellationToken) -> None:
        try:
            component = await self._loader.load(identifier, variant)
        except Exception as e:
            if token.cancelled:
                logger.debug(f"Discarding failed load of {identifier}: {token.reason}")
                return
            error = e if isinstance(e, ComponentLoadError) else ComponentLoadError.from_exception(e, identifier)
            self._apply(state=LoadState.ERROR, error=error)
            return

        if token.cancelled:
            logger.debug(f"Discarding load of {identifier}: {token.reason}")
            return
        self._apply(state=LoadState.SUCCESS, component=component, error=None)

    def _apply(self, **changes) -> None:
        if not self._mounted:
            return
        for name, value in changes.items():
            setattr(self, name, value)
        if self._on_change is not None:
            self._on_change(self.snapshot())


@dataclass(frozen=True)
class PreloadSnapshot:
    """State of a PreloadBinding after a change."""
    loading: bool
    loaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class PreloadBinding:
    """Preloads a batch of components on behalf of a mounted view."""

    def __init__(
        self,
        loader: "ComponentLoader",
        identifiers: Sequence[str],
        on_change: Optional[Callable[[PreloadSnapshot], None]] = None,
    ):
        self._loader = loader
        self._identifiers = list(identifiers)
        self._on_change = on_change
        self._mounted = False
        self._token: Optional[CancellationToken] = None
        self._task: Optional["asyncio.Task[None]"] = None

        self.loading = False
        self.loaded: List[str] = []
        self.failed: List[str] = []

    @property
    def identifiers(self) -> List[str]:
        return list(self._identifiers)

    @property
    def mounted(self) -> bool:
        return self._mounted

    def snapshot(self) -> PreloadSnapshot:
        return PreloadSnapshot(loading=self.loading, loaded=list(self.loaded), failed=list(self.failed))

    def mount(self) -> Optional["asyncio.Task[None]"]:
        if self._mounted:
            return self._task
        self._mounted = True
        return self._start()

    def unmount(self) -> None:
        self._mounted = False
        if self._token is not None:
            self._token.cancel("unmounted")

    def set_identifiers(self, identifiers: Sequence[str]) -> Optional["asyncio.Task[None]"]:
        identifiers = list(identifiers)
        if identifiers == self._identifiers:
            return None
        self._identifiers = identifiers
        if not self._mounted:
            return None
        return self._start()

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    def _start(self) -> Optional["asyncio.Task[None]"]:
        if self._token is not None:
            self._token.cancel("superseded")
        if not self._identifiers:
            self._task = None
            return None

        token = CancellationToken()
        self._token = token
        self._apply(loading=True)
        self._task = asyncio.ensure_future(self._run(list(self._identifiers), token))
        return self._task

    async def _run(self, identifiers: List[str], token: CancellationToken) -> None:
        report = await self._loader.preload_with_report(identifiers)

        if token.cancelled:
            logger.debug(f"Discarding preload of {len(identifiers)} components: {token.reason}")
            return
        self._apply(loaded=report.loaded, failed=report.failed, loading=False)

    def _apply(self, **changes) -> None:
        if not self._mounted:
            return
        for name, value in changes.items():
            setattr(self, name, value)
        if self._on_change is not None:
            self._on_change(self.snapshot())
