"""Cooperative cancellation token for long-running tree operations."""

from __future__ import annotations

import threading

from .errors import CancelledError


class CancelToken:
    """Thread-safe flag checked between entries by walks, copies and archives."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError("operation cancelled")


def check_cancelled(cancel: CancelToken | None) -> None:
    """Raise ``CancelledError`` when ``cancel`` is set; ``None`` never cancels."""
    if cancel is not None:
        cancel.raise_if_cancelled()


__all__ = ["CancelToken", "check_cancelled"]
