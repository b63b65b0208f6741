"""Minimal observer used for coordinator notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class Signal:
    """A named notification with any number of listeners.

    Listeners run synchronously, in connection order. A listener raising an
    exception is logged and does not prevent the others from running.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Callable[..., Any]] = []

    def connect(self, listener: Callable[..., Any]) -> None:
        """Add a listener."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def disconnect(self, listener: Callable[..., Any]) -> None:
        """Remove a listener (no-op if not connected)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args: Any) -> None:
        """Call every listener with the given arguments."""
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("Error in %s listener %r", self.name, listener)

    def __len__(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, listeners={len(self._listeners)})"
