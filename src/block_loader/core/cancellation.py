"""Cancellation tokens for lifecycle-bound work.

A token is handed to every asynchronous call made on behalf of a consumer.
The consumer cancels it on teardown and the call checks it after each
suspension point before applying results.
"""

import logging
from typing import Callable, List

from .exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-shot cancellation flag with optional callbacks."""

    def __init__(self, reason: str = ""):
        self._cancelled = False
        self._reason = reason
        self._callbacks: List[Callable[["CancellationToken"], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "") -> None:
        """Cancel the token. Cancelling twice is a no-op."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason or self._reason
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Cancellation callback failed: {e}")

    def on_cancel(self, callback: Callable[["CancellationToken"], None]) -> None:
        """Register a callback; runs immediately if already cancelled."""
        if self._cancelled:
            callback(self)
        else:
            self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelledError(
                f"Operation cancelled{': ' + self._reason if self._reason else ''}"
            )

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
