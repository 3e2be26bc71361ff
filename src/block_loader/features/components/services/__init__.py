"""Component services - loader, preloader and lifecycle bindings."""

from .component_loader import ComponentLoader
from .preloader import ComponentPreloader
from .bindings import BindingSnapshot, ComponentBinding, PreloadBinding, PreloadSnapshot

__all__ = [
    "ComponentLoader",
    "ComponentPreloader",
    "BindingSnapshot",
    "ComponentBinding",
    "PreloadBinding",
    "PreloadSnapshot",
]
