"""Request and result types of the transaction coordinator."""

from __future__ import annotations

from dataclasses import dataclass, field

from pkupdates.daemon.types import TransactionFlag


@dataclass(frozen=True)
class CheckRequest:
    """Arguments of an update check.

    Attributes:
        force: Refresh the cache even if it is recent.
        manual: The check was triggered by the user.
    """

    force: bool = True
    manual: bool = False


@dataclass(frozen=True)
class InstallRequest:
    """Arguments of an install attempt, kept verbatim across EULA prompts."""

    package_ids: frozenset[str]
    simulate: bool = True
    allow_untrusted: bool = False

    @property
    def flags(self) -> TransactionFlag:
        """Daemon transaction flags for this request.

        Only trusted packages by default; a simulation is always restricted
        to trusted packages, allowing untrusted ones drops every flag.
        """
        if self.simulate:
            return TransactionFlag.ONLY_TRUSTED | TransactionFlag.SIMULATE
        if self.allow_untrusted:
            return TransactionFlag.NONE
        return TransactionFlag.ONLY_TRUSTED


@dataclass(frozen=True)
class UpdateDetail:
    """Details about one update, as shown to the user.

    Attributes:
        package_id: The update.
        update_text: Description of the update.
        urls: Vendor, bug tracker and CVE links, in that order.
    """

    package_id: str
    update_text: str
    urls: tuple[str, ...] = field(default_factory=tuple)
