"""Immutable aggregate of the coordinator's state.

The coordinator regenerates an ``UpdatesSnapshot`` on every state change
and publishes it atomically. Per-field change notifications are derived by
diffing consecutive snapshots (see ``changed_fields``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from pkupdates.core.types import Activity, CheckOutcome, StatusIcon
from pkupdates.daemon.types import NetworkState

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pkupdates.updates.catalog import CatalogSnapshot

_ACTIVITY_TEXT = {
    Activity.CHECKING_CACHE: "Checking updates",
    Activity.ENUMERATING_UPDATES: "Getting updates",
    Activity.INSTALLING_UPDATES: "Installing updates",
}


def _plural(n: int, singular: str, plural: str) -> str:
    return f"{n} {singular if n == 1 else plural}"


def format_duration(seconds: float) -> str:
    """Spell out a duration with its largest unit (e.g. ``3 hours``)."""
    seconds = max(0, int(seconds))
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            return _plural(seconds // size, unit, unit + "s")
    return _plural(seconds, "second", "seconds")


def timestamp_text(refresh_ms: int, now_ms: int) -> str:
    """Describe when the cache was last refreshed."""
    if refresh_ms < 0:
        return "Last check: never"
    return f"Last check: {format_duration((now_ms - refresh_ms) / 1000)} ago"


def icon_for(security_count: int, important_count: int, count: int) -> StatusIcon:
    """Status icon hint, by the most urgent category available."""
    if security_count > 0:
        return StatusIcon.HIGH
    if important_count > 0:
        return StatusIcon.MEDIUM
    if count > 0:
        return StatusIcon.LOW
    return StatusIcon.NONE


def overall_message(
    activity: Activity,
    catalog: CatalogSnapshot,
    network_online: bool,
    outcome: CheckOutcome,
) -> str:
    """Overall status with the number of available updates."""
    if activity != Activity.IDLE:
        return _ACTIVITY_TEXT.get(activity, "Working")

    if not catalog.is_up_to_date:
        msg = "You have " + _plural(catalog.count, "new update", "new updates")
        extra = []
        if catalog.security_count > 0:
            extra.append(_plural(catalog.security_count, "security update", "security updates"))
        if catalog.important_count > 0:
            extra.append(
                _plural(catalog.important_count, "important update", "important updates")
            )
        if extra:
            msg += "\n(including " + " and ".join(extra) + ")"
        return msg

    if not network_online:
        return "Your system is offline"
    if outcome == CheckOutcome.FAILED:
        return "Last check failed"
    if outcome == CheckOutcome.NEVER_CHECKED:
        return "Not checked yet"
    return "Your system is up to date"


@dataclass(frozen=True)
class UpdatesSnapshot:
    """Read-only view of everything a UI needs to display."""

    activity: Activity = Activity.IDLE
    last_check_outcome: CheckOutcome = CheckOutcome.NEVER_CHECKED
    count: int = 0
    important_count: int = 0
    security_count: int = 0
    is_system_up_to_date: bool = True
    status_icon_hint: StatusIcon = StatusIcon.NONE
    message: str = "Not checked yet"
    percentage: int | None = 0
    last_check_timestamp: datetime | None = None
    status_message: str = "Idle"
    packages: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    is_active: bool = False
    network_state: NetworkState = NetworkState.UNKNOWN
    is_network_online: bool = False
    is_network_mobile: bool = False
    is_on_battery: bool = False

    @classmethod
    def build(
        cls,
        *,
        catalog: CatalogSnapshot,
        activity: Activity,
        outcome: CheckOutcome,
        percentage: int | None,
        status_message: str,
        last_check_timestamp: datetime | None,
        network_state: NetworkState,
        on_battery: bool,
    ) -> UpdatesSnapshot:
        """Derive a snapshot from the coordinator's raw state."""
        online = network_state.is_online
        return cls(
            activity=activity,
            last_check_outcome=outcome,
            count=catalog.count,
            important_count=catalog.important_count,
            security_count=catalog.security_count,
            is_system_up_to_date=catalog.is_up_to_date,
            status_icon_hint=icon_for(
                catalog.security_count, catalog.important_count, catalog.count
            ),
            message=overall_message(activity, catalog, online, outcome),
            percentage=percentage,
            last_check_timestamp=last_check_timestamp,
            status_message=status_message,
            packages=catalog.packages,
            is_active=activity != Activity.IDLE,
            network_state=network_state,
            is_network_online=online,
            is_network_mobile=network_state == NetworkState.MOBILE,
            is_on_battery=on_battery,
        )


def changed_fields(old: UpdatesSnapshot, new: UpdatesSnapshot) -> frozenset[str]:
    """Names of the fields whose values differ between two snapshots."""
    changed = set()
    for f in fields(UpdatesSnapshot):
        before = getattr(old, f.name)
        after = getattr(new, f.name)
        if f.name == "packages":
            before, after = dict(before), dict(after)
        if before != after:
            changed.add(f.name)
    return frozenset(changed)
