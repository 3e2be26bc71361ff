"""Core module for block-loader - exceptions and cancellation primitives."""

from .exceptions import (
    BlockLoaderError,
    ConfigurationError,
    ComponentFetchError,
    ComponentSourceError,
    MaterializationError,
    OperationCancelledError,
    ComponentLoadError,
    create_error_response,
)
from .cancellation import CancellationToken

__all__ = [
    "BlockLoaderError",
    "ConfigurationError",
    "ComponentFetchError",
    "ComponentSourceError",
    "MaterializationError",
    "OperationCancelledError",
    "ComponentLoadError",
    "create_error_response",
    "CancellationToken",
]
