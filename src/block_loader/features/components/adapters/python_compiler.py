"""Materialize component source text into a callable.

The source is executed in a fresh namespace that contains only the injected
rendering primitives, a reduced set of builtins and an ``exports`` mapping.
It must publish exactly one callable, either as ``exports["default"]`` or
as a module-level ``__default__`` binding.

This is scope isolation, not a security sandbox: source must come from a
trusted endpoint.
"""

import builtins
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .hooks import RENDER_PRIMITIVES
from ..entities.models import ExecutableComponent
from ....core.exceptions import ConfigurationError, MaterializationError

logger = logging.getLogger(__name__)

EXPORTS_NAME = "exports"
DEFAULT_EXPORT = "default"
DEFAULT_BINDING = "__default__"

RESERVED_NAMES = frozenset({EXPORTS_NAME, DEFAULT_BINDING, "__builtins__", "__name__"})

SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "callable", "dict", "divmod", "enumerate",
    "filter", "float", "format", "frozenset", "hash", "int", "isinstance",
    "issubclass", "iter", "len", "list", "map", "max", "min", "next",
    "object", "property", "range", "repr", "reversed", "round", "set",
    "slice", "sorted", "staticmethod", "classmethod", "str", "sum", "super",
    "tuple", "zip", "__build_class__",
    "Exception", "ValueError", "TypeError", "KeyError", "IndexError",
    "AttributeError", "RuntimeError", "StopIteration", "NotImplementedError",
)

SAFE_BUILTINS: Mapping[str, Any] = MappingProxyType(
    {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}
)


class PythonSourceCompiler:
    """Compiler producing components from Python source text.

    Args:
        capabilities: Names injected into every executed source. Defaults to
            the rendering primitives (state, effect, ref, memo, callback).
        allowed_builtins: Builtins visible to executed code.
    """

    def __init__(
        self,
        capabilities: Optional[Mapping[str, Any]] = None,
        allowed_builtins: Mapping[str, Any] = SAFE_BUILTINS,
    ):
        capabilities = dict(RENDER_PRIMITIVES if capabilities is None else capabilities)
        clashing = RESERVED_NAMES.intersection(capabilities)
        if clashing:
            raise ConfigurationError(
                f"Capability names are reserved: {', '.join(sorted(clashing))}"
            )
        self._capabilities = MappingProxyType(capabilities)
        self._builtins = dict(allowed_builtins)

    @property
    def capabilities(self) -> Mapping[str, Any]:
        return self._capabilities

    def _namespace(self, identifier: str) -> Dict[str, Any]:
        return {
            "__builtins__": dict(self._builtins),
            "__name__": f"block_loader.components.{identifier}",
            EXPORTS_NAME: {},
            **self._capabilities,
        }

    def materialize(self, source_text: str, identifier: str) -> ExecutableComponent:
        """Execute ``source_text`` and return the component it exports.

        Raises:
            MaterializationError: evaluation failed, nothing was exported, or
                the export is not callable
        """
        namespace = self._namespace(identifier)

        try:
            code = compile(source_text, f"<component:{identifier}>", "exec")
            exec(code, namespace)
        except Exception as e:
            logger.error(f"Failed to execute code for {identifier}: {e}")
            raise MaterializationError(
                f"Failed to execute component code for {identifier}: {e}",
                identifier=identifier,
            ) from e

        exports = namespace.get(EXPORTS_NAME)
        component = exports.get(DEFAULT_EXPORT) if isinstance(exports, dict) else None
        if component is None:
            component = namespace.get(DEFAULT_BINDING)

        if component is None:
            raise MaterializationError(
                f"Component code for {identifier} did not export a component",
                identifier=identifier,
            )

        if not callable(component):
            raise MaterializationError(
                f"Component code for {identifier} exported a non-callable "
                f"{type(component).__name__}",
                identifier=identifier,
            )

        return component
