"""Abstract interface of the package-manager daemon.

This module provides:
- Transaction: Protocol for one asynchronous request/response exchange
- PackageDaemon: Protocol for the daemon service creating transactions

Daemon adapters implement these protocols. Creating a transaction never
blocks; results arrive later as event messages (see ``events``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from pkupdates.daemon.events import TransactionEvent
    from pkupdates.daemon.types import Role, TransactionFlag


class Transaction(Protocol):
    """One in-flight daemon transaction.

    Events must be delivered on the thread running the coordinator's event
    loop, after ``connect()`` has been called.
    """

    @property
    def tid(self) -> str:
        """Daemon-side transaction identifier."""
        ...

    @property
    def role(self) -> Role:
        """What this transaction does."""
        ...

    def connect(self, callback: Callable[[TransactionEvent], None]) -> None:
        """Register the callback receiving every event of this transaction."""
        ...

    def cancel(self) -> None:
        """Ask the daemon to cancel the transaction (best effort)."""
        ...


class PackageDaemon(Protocol):
    """Package-manager daemon service."""

    def refresh_cache(self, force: bool) -> Transaction:
        """Refresh repository metadata."""
        ...

    def get_updates(self) -> Transaction:
        """Enumerate available updates (one ``PackageReported`` per update)."""
        ...

    def get_update_detail(self, package_id: str) -> Transaction:
        """Fetch details about one update."""
        ...

    def update_packages(
        self,
        package_ids: Iterable[str],
        flags: TransactionFlag,
    ) -> Transaction:
        """Install updates for the given packages."""
        ...

    def accept_eula(self, eula_id: str) -> Transaction:
        """Record acceptance of a license agreement."""
        ...
