"""Catalog of available updates.

This module provides:
- PackageEntry: One available update
- CatalogSnapshot: Immutable, published view of one enumeration pass
- UpdateCatalog: Working set filled during enumeration, committed atomically

Readers only ever see committed snapshots; entries recorded during a pass
stay invisible until ``commit()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from pkupdates.core.types import UpdateCategory
from pkupdates.daemon.types import Info

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_INFO_CATEGORY: dict[Info, UpdateCategory] = {
    Info.SECURITY: UpdateCategory.SECURITY,
    Info.IMPORTANT: UpdateCategory.IMPORTANT,
    Info.BUGFIX: UpdateCategory.BUGFIX,
}


def category_for(info: Info) -> UpdateCategory:
    """Map a daemon package info to an update category."""
    return _INFO_CATEGORY.get(info, UpdateCategory.OTHER)


@dataclass(frozen=True)
class PackageEntry:
    """An available update, identified by its package id."""

    package_id: str
    summary: str
    category: UpdateCategory = UpdateCategory.OTHER


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable result of one enumeration pass.

    Attributes:
        entries: package id -> entry (read-only mapping).
        security: Ids of security updates.
        important: Ids of important updates.
        other: Ids of every other update (bugfix included).
    """

    entries: Mapping[str, PackageEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )
    security: tuple[str, ...] = ()
    important: tuple[str, ...] = ()
    other: tuple[str, ...] = ()

    @property
    def count(self) -> int:
        """Total number of updates."""
        return len(self.entries)

    @property
    def security_count(self) -> int:
        return len(self.security)

    @property
    def important_count(self) -> int:
        return len(self.important)

    @property
    def other_count(self) -> int:
        return len(self.other)

    @property
    def is_up_to_date(self) -> bool:
        """Whether no update is available."""
        return self.count == 0

    @property
    def packages(self) -> Mapping[str, str]:
        """package id -> summary."""
        return MappingProxyType({pid: e.summary for pid, e in self.entries.items()})

    def ordered(self) -> list[PackageEntry]:
        """Entries in display order: security, important, then the rest."""
        return [self.entries[pid] for pid in (*self.security, *self.important, *self.other)]


class UpdateCatalog:
    """Accumulates updates reported during enumeration."""

    def __init__(self) -> None:
        self._working: dict[str, PackageEntry] = {}
        self._snapshot = CatalogSnapshot()

    @property
    def snapshot(self) -> CatalogSnapshot:
        """The last committed snapshot."""
        return self._snapshot

    def begin_pass(self) -> None:
        """Start a new enumeration pass with an empty working set."""
        self._working = {}

    def record(self, entry: PackageEntry) -> None:
        """Insert or overwrite an entry by id."""
        self._working[entry.package_id] = entry

    def record_package(self, info: Info, package_id: str, summary: str) -> PackageEntry | None:
        """Record a package reported by the daemon.

        Blocked updates cannot be installed and are not recorded.

        Returns:
            The recorded entry, or None if the package was skipped.
        """
        if info == Info.BLOCKED:
            logger.debug("Skipping blocked update %s", package_id)
            return None
        entry = PackageEntry(package_id, summary, category_for(info))
        self.record(entry)
        return entry

    def commit(self) -> CatalogSnapshot:
        """Freeze the working set into the published snapshot."""
        by_category: dict[UpdateCategory, list[str]] = {c: [] for c in UpdateCategory}
        for pid in sorted(self._working):
            by_category[self._working[pid].category].append(pid)

        self._snapshot = CatalogSnapshot(
            entries=MappingProxyType(dict(self._working)),
            security=tuple(by_category[UpdateCategory.SECURITY]),
            important=tuple(by_category[UpdateCategory.IMPORTANT]),
            other=tuple(
                by_category[UpdateCategory.BUGFIX] + by_category[UpdateCategory.OTHER]
            ),
        )
        logger.debug(
            "Catalog committed: %d updates (%d security, %d important)",
            self._snapshot.count,
            self._snapshot.security_count,
            self._snapshot.important_count,
        )
        return self._snapshot
