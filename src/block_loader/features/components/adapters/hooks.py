"""Rendering primitives injected into materialized components.

Components are plain callables. While ``ComponentInstance.render`` runs one,
the hook functions below read and write per-instance slots in call order,
so state, refs and memoized values survive across renders.
"""

import logging
from contextvars import ContextVar
from typing import Any, Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

_current_instance: ContextVar[Optional["ComponentInstance"]] = ContextVar(
    "block_loader_current_instance", default=None
)

_UNSET = object()


class Ref:
    """Mutable box whose identity is stable across renders."""

    __slots__ = ("current",)

    def __init__(self, current: Any = None):
        self.current = current

    def __repr__(self) -> str:
        return f"Ref({self.current!r})"


class _EffectSlot:
    __slots__ = ("deps", "cleanup")

    def __init__(self):
        self.deps: Optional[Tuple[Any, ...]] = None
        self.cleanup: Optional[Callable[[], Any]] = None


def _deps_changed(previous: Optional[Tuple[Any, ...]], deps: Optional[Sequence[Any]]) -> bool:
    if deps is None or previous is None:
        return True
    return tuple(deps) != previous


class ComponentInstance:
    """A mounted component with its hook slots.

    Args:
        component: Materialized component callable
        on_update: Called with the instance whenever a state setter changes state
    """

    def __init__(
        self,
        component: Callable[..., Any],
        on_update: Optional[Callable[["ComponentInstance"], None]] = None,
    ):
        self.component = component
        self.on_update = on_update
        self.mounted = True
        self.dirty = False
        self.render_count = 0
        self._slots: List[Any] = []
        self._cursor = 0
        self._pending_effects: List[Tuple[_EffectSlot, Callable[[], Any], Optional[Sequence[Any]]]] = []

    def render(self, *args: Any, **props: Any) -> Any:
        """Call the component with hooks bound to this instance."""
        if not self.mounted:
            raise RuntimeError("Cannot render an unmounted component")

        self._cursor = 0
        self._pending_effects = []
        token = _current_instance.set(self)
        try:
            output = self.component(*args, **props)
        finally:
            _current_instance.reset(token)

        self.render_count += 1
        self.dirty = False
        self._flush_effects()
        return output

    def unmount(self) -> None:
        """Run every outstanding effect cleanup and detach the instance."""
        if not self.mounted:
            return
        self.mounted = False
        for slot in self._slots:
            if isinstance(slot, _EffectSlot) and slot.cleanup is not None:
                cleanup, slot.cleanup = slot.cleanup, None
                cleanup()

    def _next_slot(self, factory: Callable[[], Any]) -> Any:
        if self._cursor == len(self._slots):
            self._slots.append(factory())
        slot = self._slots[self._cursor]
        self._cursor += 1
        return slot

    def _schedule_update(self) -> None:
        if not self.mounted:
            logger.debug("State update on unmounted component ignored")
            return
        self.dirty = True
        if self.on_update is not None:
            self.on_update(self)

    def _flush_effects(self) -> None:
        effects, self._pending_effects = self._pending_effects, []
        for slot, effect, deps in effects:
            if slot.cleanup is not None:
                cleanup, slot.cleanup = slot.cleanup, None
                cleanup()
            result = effect()
            slot.cleanup = result if callable(result) else None
            slot.deps = tuple(deps) if deps is not None else None


def _instance() -> ComponentInstance:
    instance = _current_instance.get()
    if instance is None:
        raise RuntimeError("Hooks can only be called while a component is rendering")
    return instance


def use_state(initial: Any = None) -> Tuple[Any, Callable[[Any], None]]:
    """Return ``(value, set_value)``. ``set_value`` accepts a value or ``prev -> value``."""
    instance = _instance()
    cell = instance._next_slot(lambda: [initial() if callable(initial) else initial])

    def set_value(value: Any) -> None:
        new_value = value(cell[0]) if callable(value) else value
        if new_value is cell[0] or new_value == cell[0]:
            return
        cell[0] = new_value
        instance._schedule_update()

    return cell[0], set_value


def use_ref(initial: Any = None) -> Ref:
    return _instance()._next_slot(lambda: Ref(initial))


def use_memo(factory: Callable[[], Any], deps: Optional[Sequence[Any]] = None) -> Any:
    """Recompute ``factory()`` only when ``deps`` change; ``None`` recomputes every render."""
    cell = _instance()._next_slot(lambda: [_UNSET, None])

    if cell[0] is _UNSET or _deps_changed(cell[1], deps):
        cell[0] = factory()
        cell[1] = tuple(deps) if deps is not None else None

    return cell[0]


def use_callback(callback: Callable[..., Any], deps: Optional[Sequence[Any]] = None) -> Callable[..., Any]:
    return use_memo(lambda: callback, deps)


def use_effect(effect: Callable[[], Any], deps: Optional[Sequence[Any]] = None) -> None:
    """Run ``effect`` after render when ``deps`` change.

    A callable returned by the effect is kept as its cleanup and runs before
    the next execution or on unmount.
    """
    instance = _instance()
    slot = instance._next_slot(_EffectSlot)

    if instance.render_count == 0 or _deps_changed(slot.deps, deps):
        instance._pending_effects.append((slot, effect, deps))


RENDER_PRIMITIVES = {
    "use_state": use_state,
    "use_effect": use_effect,
    "use_ref": use_ref,
    "use_memo": use_memo,
    "use_callback": use_callback,
}
