"""In-memory package-manager daemon for coordinator tests."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from pkupdates.daemon.events import Finished, PackageReported
from pkupdates.daemon.types import Exit, Info, Role, TransactionFlag

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from pkupdates.daemon.events import TransactionEvent

_tids = itertools.count(1)


class FakeTransaction:
    """Transaction whose events are pushed by the test."""

    def __init__(self, role: Role, **args: object) -> None:
        self.tid = f"/{next(_tids)}_fake"
        self.role = role
        self.args = args
        self.cancelled = False
        self._callback: Callable[[TransactionEvent], None] | None = None

    def connect(self, callback: Callable[[TransactionEvent], None]) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self.cancelled = True

    def emit(self, *events: TransactionEvent) -> None:
        """Deliver events to the connected callback."""
        assert self._callback is not None, "transaction not connected"
        for event in events:
            self._callback(event)

    def finish(self, exit: Exit = Exit.SUCCESS) -> None:
        self.emit(Finished(exit, runtime_ms=10))


class FakeDaemon:
    """Records every transaction it creates, per role."""

    def __init__(self) -> None:
        self.transactions: list[FakeTransaction] = []

    def _create(self, role: Role, **args: object) -> FakeTransaction:
        transaction = FakeTransaction(role, **args)
        self.transactions.append(transaction)
        return transaction

    def of_role(self, role: Role) -> list[FakeTransaction]:
        return [t for t in self.transactions if t.role == role]

    def last(self, role: Role) -> FakeTransaction:
        created = self.of_role(role)
        assert created, f"no {role.value} transaction created"
        return created[-1]

    def refresh_cache(self, force: bool) -> FakeTransaction:
        return self._create(Role.REFRESH_CACHE, force=force)

    def get_updates(self) -> FakeTransaction:
        return self._create(Role.GET_UPDATES)

    def get_update_detail(self, package_id: str) -> FakeTransaction:
        return self._create(Role.GET_UPDATE_DETAIL, package_id=package_id)

    def update_packages(
        self,
        package_ids: Iterable[str],
        flags: TransactionFlag,
    ) -> FakeTransaction:
        return self._create(Role.UPDATE_PACKAGES, package_ids=list(package_ids), flags=flags)

    def accept_eula(self, eula_id: str) -> FakeTransaction:
        return self._create(Role.ACCEPT_EULA, eula_id=eula_id)


def report_updates(transaction: FakeTransaction, updates: Iterable[tuple[Info, str]]) -> None:
    """Emit one PackageReported per (info, package id) pair."""
    for info, package_id in updates:
        transaction.emit(PackageReported(info, package_id, f"{package_id.split(';')[0]} update"))
