"""Ownership of in-flight daemon transactions.

This module provides:
- HandleKind: The kinds of transactions the coordinator runs
- TransactionHandle: One owned transaction with an explicit validity flag
- HandleTable: At most one live handle per kind

The daemon may dispose of a transaction at any time, and events for a
transaction may still be queued after the coordinator is done with it.
Every access therefore goes through a handle that is explicitly
invalidated when closed.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pkupdates.daemon.base import Transaction

logger = logging.getLogger(__name__)

_serials = itertools.count(1)


class HandleKind(IntEnum):
    """Kind of transaction."""

    CACHE_REFRESH = auto()
    ENUMERATE = auto()
    INSTALL = auto()
    DETAIL = auto()
    EULA = auto()


class StaleHandleError(RuntimeError):
    """A closed handle was accessed."""


class HandleBusyError(RuntimeError):
    """A live handle of the same kind already exists."""


@dataclass(eq=False)
class TransactionHandle:
    """Owned wrapper around one daemon transaction.

    Attributes:
        kind: What the transaction does.
        serial: Local, monotonically increasing identifier.
        context: Data the coordinator needs when the transaction ends
            (install request, EULA id, ...).
        started_at: When the handle was opened.
        valid: False once the handle is closed.
    """

    kind: HandleKind
    _transaction: Transaction
    context: dict[str, Any] = field(default_factory=dict)
    serial: int = field(default_factory=lambda: next(_serials))
    started_at: float = field(default_factory=time.monotonic)
    valid: bool = True

    @property
    def transaction(self) -> Transaction:
        """The wrapped transaction.

        Raises:
            StaleHandleError: If the handle was closed.
        """
        if not self.valid:
            raise StaleHandleError(f"{self!r} is closed")
        return self._transaction

    @property
    def tid(self) -> str:
        """Daemon transaction id, empty once closed."""
        if not self.valid:
            return ""
        return self._transaction.tid

    @property
    def runtime(self) -> float:
        """Seconds since the handle was opened."""
        return time.monotonic() - self.started_at

    def cancel(self) -> bool:
        """Ask the daemon to cancel the transaction.

        Returns:
            True if a cancellation was requested, False if the handle is closed.
        """
        if not self.valid:
            return False
        self._transaction.cancel()
        return True

    def close(self) -> None:
        """Invalidate the handle. Idempotent."""
        self.valid = False

    def __repr__(self) -> str:
        """Human-readable representation."""
        state = "live" if self.valid else "closed"
        return f"TransactionHandle({self.kind.name}, serial={self.serial}, {state})"


class HandleTable:
    """Live handles, at most one per kind."""

    def __init__(self) -> None:
        self._handles: dict[HandleKind, TransactionHandle] = {}

    def open(
        self,
        kind: HandleKind,
        transaction: Transaction,
        **context: Any,
    ) -> TransactionHandle:
        """Register a new live handle.

        Raises:
            HandleBusyError: If a live handle of this kind exists.
        """
        existing = self._handles.get(kind)
        if existing is not None and existing.valid:
            raise HandleBusyError(f"{kind.name} transaction already running: {existing!r}")

        handle = TransactionHandle(kind, transaction, context=dict(context))
        self._handles[kind] = handle
        logger.debug("Opened %r (tid=%s)", handle, handle.tid)
        return handle

    def replace(
        self,
        kind: HandleKind,
        transaction: Transaction,
        **context: Any,
    ) -> TransactionHandle:
        """Close any live handle of this kind, then open a new one."""
        self.close_kind(kind)
        return self.open(kind, transaction, **context)

    def get(self, kind: HandleKind) -> TransactionHandle | None:
        """Get the live handle of a kind, if any."""
        handle = self._handles.get(kind)
        if handle is not None and handle.valid:
            return handle
        return None

    def is_current(self, handle: TransactionHandle) -> bool:
        """Whether the handle is live and still the one registered for its kind."""
        return handle.valid and self._handles.get(handle.kind) is handle

    def is_open(self, *kinds: HandleKind) -> bool:
        """Whether any of the given kinds has a live handle."""
        return any(self.get(kind) is not None for kind in kinds)

    def close(self, handle: TransactionHandle) -> None:
        """Close a handle and forget it if it is the registered one."""
        handle.close()
        if self._handles.get(handle.kind) is handle:
            del self._handles[handle.kind]
            logger.debug("Closed %r after %.1fs", handle, handle.runtime)

    def close_kind(self, kind: HandleKind) -> None:
        """Close the handle of a kind, if any."""
        handle = self._handles.pop(kind, None)
        if handle is not None:
            handle.close()

    def live(self) -> list[TransactionHandle]:
        """All live handles."""
        return [h for h in self._handles.values() if h.valid]
