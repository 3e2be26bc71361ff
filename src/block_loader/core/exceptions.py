"""Exception hierarchy for block-loader.

All exceptions inherit from BlockLoaderError and carry an error code and a
details mapping so callers can surface them uniformly.
"""

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class BlockLoaderError(Exception):
    """Base exception for all block-loader errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(BlockLoaderError):
    """Raised when loader configuration is invalid."""
    pass


# Fetch Errors
class ComponentFetchError(BlockLoaderError):
    """Raised when the source endpoint could not be reached after all attempts.

    Covers transport failures only: network errors, error status codes and
    the hard request timeout. The last underlying cause is chained.
    """

    def __init__(self, message: str, identifier: str, attempts: int):
        super().__init__(
            message,
            details={"identifier": identifier, "attempts": attempts},
        )
        self.identifier = identifier
        self.attempts = attempts


class ComponentSourceError(BlockLoaderError):
    """Raised when the endpoint answered but delivered no usable source text."""

    def __init__(self, message: str, identifier: str):
        super().__init__(message, details={"identifier": identifier})
        self.identifier = identifier


class MaterializationError(BlockLoaderError):
    """Raised when source text cannot be turned into a callable component."""

    def __init__(self, message: str, identifier: str):
        super().__init__(message, details={"identifier": identifier})
        self.identifier = identifier


class OperationCancelledError(BlockLoaderError):
    """Raised when work is attempted under a cancelled token."""
    pass


class ComponentLoadError(BlockLoaderError):
    """Normalized failure of a component load.

    Constructed once per failed load and never modified afterwards: the
    message, identifier, timestamp, cause and details are exposed read-only.
    """

    def __init__(
        self,
        message: str,
        identifier: str,
        cause: Optional[BaseException] = None,
        occurred_at: Optional[datetime] = None,
    ):
        # Skip BlockLoaderError.__init__, which assigns plain attributes
        Exception.__init__(self, message)
        self._message = message
        self._identifier = identifier
        self._cause = cause
        self._occurred_at = occurred_at or datetime.now(timezone.utc)
        self._error_code = self.__class__.__name__
        self._details = MappingProxyType({
            "identifier": identifier,
            "occurred_at": self._occurred_at.isoformat(),
            "cause": type(cause).__name__ if cause is not None else None,
        })

    @property
    def message(self) -> str:
        return self._message

    @property
    def error_code(self) -> str:
        return self._error_code

    @property
    def details(self) -> Mapping[str, Any]:
        return self._details

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def occurred_at(self) -> datetime:
        return self._occurred_at

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @classmethod
    def from_exception(cls, error: BaseException, identifier: str) -> "ComponentLoadError":
        """Wrap any failure raised while loading ``identifier``."""
        message = str(error) or type(error).__name__
        return cls(message, identifier=identifier, cause=error)

    def __repr__(self) -> str:
        return (
            f"ComponentLoadError(identifier={self._identifier!r}, "
            f"message={self.message!r}, occurred_at={self._occurred_at.isoformat()!r})"
        )


def create_error_response(exception: BlockLoaderError) -> Dict[str, Any]:
    """Create standardized error payload from exception.

    Args:
        exception: The block-loader exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": dict(exception.details),
            "type": exception.__class__.__name__,
        }
    }
