"""Transaction coordinator driving the package-manager daemon.

This module provides:
- TransactionCoordinator: State machine sequencing update checks, update
  detail requests, installs and license agreement prompts

The coordinator is the "brain" of the update checker:
1. Commands (check, install, EULA answers) open daemon transactions
2. Transaction events are queued and processed one at a time
3. Results are aggregated into an immutable UpdatesSnapshot
4. Signals tell the UI what happened

Activity state machine:
    | From               | Event                   | To                  |
    |--------------------|-------------------------|---------------------|
    | IDLE               | check (stale cache)     | CHECKING_CACHE      |
    | IDLE               | check (fresh cache)     | ENUMERATING_UPDATES |
    | CHECKING_CACHE     | refresh finished        | ENUMERATING_UPDATES |
    | ENUMERATING_UPDATES| enumeration finished    | IDLE                |
    | IDLE               | install                 | INSTALLING_UPDATES  |
    | INSTALLING_UPDATES | EULA required           | INSTALLING_UPDATES  |
    |                    |                         | (suspended)         |
    | INSTALLING_UPDATES | finished / failed       | IDLE                |
    | any                | stage error             | IDLE                |

Everything runs on a single thread: daemon transactions must deliver their
events on the thread running the coordinator, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pkupdates.core.config import UpdatesConfig
from pkupdates.core.strings import info_present
from pkupdates.core.types import Activity, CheckOutcome
from pkupdates.daemon.events import (
    ErrorReported,
    EulaRequired,
    Finished,
    PackageReported,
    ProgressChanged,
    RepoSignatureRequired,
    RestartRequired,
    StatusChanged,
    UpdateDetailReported,
)
from pkupdates.daemon.package_id import package_name, package_version
from pkupdates.daemon.types import ErrorCode, Exit, NetworkState, Restart
from pkupdates.updates.catalog import UpdateCatalog
from pkupdates.updates.errors import (
    ErrorKind,
    EulaRequiredError,
    LicenseDeclinedError,
    LockedOrBusyError,
    NetworkUnavailableError,
    RepositorySignatureError,
    UpdatesError,
    make_error,
)
from pkupdates.updates.eula import EulaDecision, EulaNegotiator, EulaRequest
from pkupdates.updates.handle import HandleKind, HandleTable, TransactionHandle
from pkupdates.updates.progress import ProgressTracker, remap
from pkupdates.updates.signals import Signal
from pkupdates.updates.snapshot import UpdatesSnapshot, changed_fields, timestamp_text
from pkupdates.updates.state import StateStore, now_ms
from pkupdates.updates.types import CheckRequest, InstallRequest, UpdateDetail

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pkupdates.daemon.base import PackageDaemon, Transaction
    from pkupdates.daemon.events import TransactionEvent
    from pkupdates.updates.catalog import CatalogSnapshot

logger = logging.getLogger(__name__)

# Progress sub-ranges of a check pass
REFRESH_RANGE = (0, 50)
ENUMERATE_RANGE = (50, 100)
FULL_RANGE = (0, 100)

_CHECK_KINDS = (HandleKind.CACHE_REFRESH, HandleKind.ENUMERATE)
_INSTALL_KINDS = (HandleKind.INSTALL, HandleKind.EULA)
_CHECK_ACTIVITIES = (Activity.CHECKING_CACHE, Activity.ENUMERATING_UPDATES)
_RESTARTS_TO_ANNOUNCE = (
    Restart.SYSTEM,
    Restart.SESSION,
    Restart.SECURITY_SYSTEM,
    Restart.SECURITY_SESSION,
)

_Envelope = tuple[TransactionHandle, "TransactionEvent"]


class TransactionCoordinator:
    """Central orchestrator for update checks and installs.

    Usage:
        coordinator = TransactionCoordinator(daemon)
        coordinator.done.connect(on_done)
        coordinator.eula_required.connect(show_license)

        coordinator.check_updates(force=False)
        await coordinator.run()  # processes daemon events until stop()

    Signals:
        updates_changed(): the update catalog was replaced
        done(): a check or install attempt ended (success or failure)
        updates_installed(package_ids): an install succeeded
        update_detail(UpdateDetail): details requested via get_update_details()
        eula_required(EulaRequest): a license agreement must be answered
        restart_required(Restart, package_id): a restart is needed after install
        new_updates_available(count): an automatic check found a new count
        error_occurred(UpdatesError): a classified error was surfaced
        snapshot_changed(UpdatesSnapshot, changed_fields): any aggregate changed
    """

    def __init__(
        self,
        daemon: PackageDaemon,
        config: UpdatesConfig | None = None,
        state_store: StateStore | None = None,
        network_state: NetworkState = NetworkState.ONLINE,
        on_battery: bool = False,
    ) -> None:
        """Initialize the coordinator.

        Args:
            daemon: Package-manager daemon to drive.
            config: Tunables (defaults if None).
            state_store: Where the last refresh time is kept.
            network_state: Initial network state.
            on_battery: Initial power state.
        """
        self._daemon = daemon
        self._config = config or UpdatesConfig()
        self._state_store = state_store or StateStore()

        # Signals
        self.updates_changed = Signal("updates_changed")
        self.done = Signal("done")
        self.updates_installed = Signal("updates_installed")
        self.update_detail = Signal("update_detail")
        self.eula_required = Signal("eula_required")
        self.restart_required = Signal("restart_required")
        self.new_updates_available = Signal("new_updates_available")
        self.error_occurred = Signal("error_occurred")
        self.snapshot_changed = Signal("snapshot_changed")

        # Collaborators
        self._handles = HandleTable()
        self._catalog = UpdateCatalog()
        self._progress = ProgressTracker()
        self._eulas = EulaNegotiator(on_surface=self.eula_required.emit)

        # State
        self._activity = Activity.IDLE
        self._outcome = CheckOutcome.NEVER_CHECKED
        self._last_check_timestamp: datetime | None = None
        self._network_state = network_state
        self._on_battery = on_battery
        self._current_check: CheckRequest | None = None
        self._coalesced_check: CheckRequest | None = None
        self._pending_install: InstallRequest | None = None
        self._deferred_check = False
        self._last_update_count = 0

        # Event processing
        self._events: asyncio.Queue[_Envelope | None] = asyncio.Queue()
        self._running = False

        self._snapshot = self._build_snapshot()

    # =========================================================================
    # Aggregate surface
    # =========================================================================

    @property
    def snapshot(self) -> UpdatesSnapshot:
        """The current immutable aggregate."""
        return self._snapshot

    @property
    def catalog(self) -> CatalogSnapshot:
        """The last committed update catalog."""
        return self._catalog.snapshot

    @property
    def config(self) -> UpdatesConfig:
        return self._config

    @property
    def activity(self) -> Activity:
        return self._activity

    @property
    def last_check_outcome(self) -> CheckOutcome:
        return self._outcome

    @property
    def count(self) -> int:
        """Total number of updates, including important and security ones."""
        return self._snapshot.count

    @property
    def important_count(self) -> int:
        return self._snapshot.important_count

    @property
    def security_count(self) -> int:
        return self._snapshot.security_count

    @property
    def is_system_up_to_date(self) -> bool:
        return self._snapshot.is_system_up_to_date

    @property
    def status_icon_hint(self) -> str:
        return self._snapshot.status_icon_hint.value

    @property
    def message(self) -> str:
        """Overall status with the number of available updates."""
        return self._snapshot.message

    @property
    def percentage(self) -> int | None:
        """Progress 0..100, None if indeterminate."""
        return self._snapshot.percentage

    @property
    def last_check_timestamp(self) -> datetime | None:
        """When the last successful check completed."""
        return self._snapshot.last_check_timestamp

    @property
    def timestamp_text(self) -> str:
        """Human-readable time of the last cache refresh."""
        return timestamp_text(self.last_refresh_timestamp(), now_ms())

    @property
    def status_message(self) -> str:
        """What is currently being done."""
        return self._snapshot.status_message

    @property
    def packages(self) -> Mapping[str, str]:
        """Available updates, package id -> summary."""
        return self._snapshot.packages

    @property
    def is_active(self) -> bool:
        return self._snapshot.is_active

    @property
    def is_network_online(self) -> bool:
        return self._snapshot.is_network_online

    @property
    def is_network_mobile(self) -> bool:
        return self._snapshot.is_network_mobile

    @property
    def is_on_battery(self) -> bool:
        return self._snapshot.is_on_battery

    @property
    def pending_install_request(self) -> InstallRequest | None:
        """Install suspended while license agreements are answered."""
        return self._pending_install

    @property
    def deferred_check_requested(self) -> bool:
        """A check is waiting for the network to come back."""
        return self._deferred_check

    @property
    def pending_eulas(self) -> list[EulaRequest]:
        """License agreements still to be answered, head first."""
        return self._eulas.pending

    def live_handles(self) -> list[TransactionHandle]:
        """Currently open transaction handles."""
        return self._handles.live()

    # =========================================================================
    # Commands
    # =========================================================================

    @staticmethod
    def package_name(package_id: str) -> str:
        """Package name extracted from its id."""
        return package_name(package_id)

    @staticmethod
    def package_version(package_id: str) -> str:
        """Package version extracted from its id."""
        return package_version(package_id)

    def last_refresh_timestamp(self) -> int:
        """Time of the last cache refresh in epoch milliseconds, -1 if never."""
        return self._state_store.load_refresh_timestamp()

    def check_updates(self, force: bool = True, manual: bool = False) -> None:
        """Refresh the cache if needed, then enumerate available updates.

        While offline the check is deferred until the network comes back.
        While another check or an install is running, the request is
        coalesced: the newest flags are kept and one follow-up check runs
        when the active attempt ends.

        Args:
            force: Refresh the cache even if it is recent.
            manual: The check was triggered by the user.
        """
        request = CheckRequest(force=force, manual=manual)

        if not self.is_network_online:
            self._defer_check(request)
            return

        if self._check_in_flight() or self._activity == Activity.INSTALLING_UPDATES:
            logger.info(
                "Update check already in progress, coalescing (force=%s, manual=%s)",
                force,
                manual,
            )
            self._coalesced_check = request
            return

        self._start_check(request)

    def on_daemon_updates_changed(self) -> None:
        """The daemon announced its list of updates changed: re-enumerate."""
        logger.debug("Daemon updates changed")
        request = CheckRequest(force=False, manual=False)
        if not self.is_network_online:
            self._defer_check(request)
            return
        if self._check_in_flight() or self._activity == Activity.INSTALLING_UPDATES:
            self._coalesced_check = self._coalesced_check or request
            return
        self._start_check(request, skip_refresh=True)

    def install_updates(
        self,
        package_ids: Iterable[str],
        simulate: bool = True,
        allow_untrusted: bool = False,
    ) -> None:
        """Install updates for the given packages.

        Args:
            package_ids: Packages to update, taken from the current catalog.
            simulate: Run a simulation first; the real install follows if it
                succeeds.
            allow_untrusted: Allow packages from untrusted origins.
        """
        request = InstallRequest(frozenset(package_ids), simulate, allow_untrusted)
        logger.info(
            "Installing updates %s (simulate=%s, untrusted=%s)",
            sorted(request.package_ids),
            simulate,
            allow_untrusted,
        )

        if not request.package_ids:
            self._reject(UpdatesError("No updates selected"))
            return
        if self._activity != Activity.IDLE:
            self._reject(
                LockedOrBusyError(
                    "The package manager is busy",
                    f"cannot install while {self._activity.name.lower()}",
                )
            )
            return

        self._submit_install(request)

    def eula_agreement_result(self, eula_id: str, agreed: bool) -> None:
        """Answer the license agreement currently surfaced.

        Answers for anything but the surfaced agreement are ignored.

        Args:
            eula_id: Agreement being answered.
            agreed: Whether the user accepted it.
        """
        if not self._eulas.is_head(eula_id):
            logger.warning("Ignoring answer for EULA %s: not the pending agreement", eula_id)
            return
        if self._handles.is_open(HandleKind.EULA):
            logger.warning("Ignoring answer for EULA %s: acceptance in progress", eula_id)
            return

        if not agreed:
            head = self._eulas.head
            if head is None:
                return
            head.decision = EulaDecision.DECLINED
            logger.info("EULA %s declined, abandoning install", eula_id)
            self._fail_install(
                LicenseDeclinedError(
                    "License agreement declined",
                    f"{head.vendor} license for {package_name(head.package_id)}",
                )
            )
            return

        self._open(HandleKind.EULA, self._daemon.accept_eula(eula_id), eula_id=eula_id)
        self._progress.set_text("Accepting license agreement")
        self._publish()

    def get_update_details(self, package_id: str) -> None:
        """Request details about an update; answered with ``update_detail``."""
        logger.debug("Requesting update details for %s", package_id)
        self._open(
            HandleKind.DETAIL,
            self._daemon.get_update_detail(package_id),
            replace_existing=True,
            package_id=package_id,
        )

    def do_delayed_check_updates(self) -> None:
        """Run the check deferred while offline, if any and if back online."""
        if not self._deferred_check or not self.is_network_online:
            return
        logger.info("Update check was deferred, running it now")
        self._deferred_check = False
        self.check_updates(force=True, manual=False)

    def set_network_state(self, state: NetworkState) -> None:
        """Network sensor input. Coming back online runs a deferred check."""
        was_online = self.is_network_online
        self._network_state = state
        self._publish()
        logger.debug("Network state: %s", state.value)
        if not was_online and self.is_network_online:
            self.do_delayed_check_updates()

    def set_on_battery(self, on_battery: bool) -> None:
        """Power sensor input."""
        self._on_battery = on_battery
        self._publish()

    # =========================================================================
    # Event processing
    # =========================================================================

    def process_pending(self) -> int:
        """Process every queued daemon event.

        Returns:
            Number of events processed.
        """
        processed = 0
        while not self._events.empty():
            item = self._events.get_nowait()
            if item is None:
                continue
            self._process_event(*item)
            processed += 1
        return processed

    async def run(self) -> None:
        """Process daemon events until ``stop()`` is called."""
        self._running = True
        logger.debug("Coordinator processing loop started")
        while self._running:
            item = await self._events.get()
            if item is None:
                continue
            self._process_event(*item)
        logger.debug("Coordinator processing loop ended")

    def stop(self) -> None:
        """Stop the processing loop. Open transactions are left running."""
        self._running = False
        self._events.put_nowait(None)

    def _post(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        self._events.put_nowait((handle, event))

    def _process_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        if not self._handles.is_current(handle):
            logger.debug("Dropping %s for stale %r", type(event).__name__, handle)
            return

        logger.debug("Processing %s for %r", event, handle)
        try:
            if handle.kind == HandleKind.CACHE_REFRESH:
                self._on_refresh_event(handle, event)
            elif handle.kind == HandleKind.ENUMERATE:
                self._on_enumerate_event(handle, event)
            elif handle.kind == HandleKind.INSTALL:
                self._on_install_event(handle, event)
            elif handle.kind == HandleKind.EULA:
                self._on_eula_event(handle, event)
            elif handle.kind == HandleKind.DETAIL:
                self._on_detail_event(handle, event)
        except Exception as e:
            logger.exception("Error processing %s for %r", type(event).__name__, handle)
            self._abort_attempt(handle, e)

    def _abort_attempt(self, handle: TransactionHandle, exc: Exception) -> None:
        """Fail the check or install a crashed handler left in flight."""
        try:
            if handle.kind in _CHECK_KINDS and self._activity in _CHECK_ACTIVITIES:
                for kind in _CHECK_KINDS:
                    live = self._handles.get(kind)
                    if live is not None:
                        live.cancel()
                    self._handles.close_kind(kind)
                self._fail_check(UpdatesError("Update check failed", str(exc)))
            elif handle.kind in _INSTALL_KINDS and self._activity == Activity.INSTALLING_UPDATES:
                self._fail_install(UpdatesError("Installing updates failed", str(exc)))
        except Exception:
            logger.exception("Cannot recover from failure of %r", handle)

    def _open(
        self,
        kind: HandleKind,
        transaction: Transaction,
        replace_existing: bool = False,
        **context: object,
    ) -> TransactionHandle:
        if replace_existing:
            handle = self._handles.replace(kind, transaction, **context)
        else:
            handle = self._handles.open(kind, transaction, **context)
        transaction.connect(lambda event: self._post(handle, event))
        return handle

    def _on_common_event(self, handle: TransactionHandle, event: TransactionEvent) -> bool:
        """Handle status, progress and error events of check/install handles.

        Returns:
            True if the event was handled.
        """
        if isinstance(event, StatusChanged):
            if self._progress.on_status(event.status, event.speed, event.download_size_remaining):
                self._publish()
            return True
        if isinstance(event, ProgressChanged):
            low, high = handle.context.get("progress_range", FULL_RANGE)
            self._progress.on_stage_progress(remap(event.percentage, low, high))
            self._publish()
            return True
        if isinstance(event, ErrorReported):
            logger.warning(
                "Daemon error on %s: %s (%s)", handle.kind.name, event.code.value, event.details
            )
            handle.context.setdefault("error", make_error(event.code, event.details))
            return True
        if isinstance(event, RepoSignatureRequired):
            logger.warning(
                "Repository signature required for %s (repo %s, key %s)",
                event.package_id,
                event.repo_name,
                event.key_id,
            )
            handle.context.setdefault(
                "error",
                RepositorySignatureError(
                    "Repository signature required",
                    f"{event.repo_name}: key {event.key_id} ({event.key_url})",
                ),
            )
            return True
        return False

    # =========================================================================
    # Check pass
    # =========================================================================

    def _check_in_flight(self) -> bool:
        return self._handles.is_open(*_CHECK_KINDS)

    def _defer_check(self, request: CheckRequest) -> None:
        logger.info("Network offline, deferring update check")
        self._deferred_check = True
        self._progress.set_text("Your system is offline")
        if request.manual:
            self.error_occurred.emit(NetworkUnavailableError("No network connection available"))
        self._publish()
        self.done.emit()

    def _cache_is_fresh(self) -> bool:
        last_refresh = self.last_refresh_timestamp()
        if last_refresh < 0:
            return False
        return now_ms() - last_refresh < self._config.cache_max_age * 1000

    def _start_check(self, request: CheckRequest, skip_refresh: bool = False) -> None:
        self._current_check = request
        self._progress.reset("Checking updates")

        if skip_refresh or (not request.force and self._cache_is_fresh()):
            logger.info("Software list is recent, skipping cache refresh")
            self._start_enumeration(FULL_RANGE)
            return

        logger.info("Checking updates (force=%s, manual=%s)", request.force, request.manual)
        self._open(
            HandleKind.CACHE_REFRESH,
            self._daemon.refresh_cache(request.force),
            progress_range=REFRESH_RANGE,
        )
        self._activity = Activity.CHECKING_CACHE
        self._publish()

    def _start_enumeration(self, progress_range: tuple[int, int]) -> None:
        self._catalog.begin_pass()
        self._open(
            HandleKind.ENUMERATE,
            self._daemon.get_updates(),
            progress_range=progress_range,
        )
        self._activity = Activity.ENUMERATING_UPDATES
        self._publish()

    def _on_refresh_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        if self._on_common_event(handle, event):
            return
        if not isinstance(event, Finished):
            return

        self._handles.close(handle)
        if event.exit == Exit.SUCCESS:
            logger.info("Cache refresh finished in %.1fs", event.runtime_ms / 1000)
            self._state_store.save_refresh_timestamp()
            self._start_enumeration(ENUMERATE_RANGE)
            return

        error = handle.context.get("error") or UpdatesError(
            "Refreshing the software list failed", event.exit.value
        )
        self._fail_check(error)

    def _on_enumerate_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        if self._on_common_event(handle, event):
            return
        if isinstance(event, PackageReported):
            self._catalog.record_package(event.info, event.package_id, event.summary)
            return
        if not isinstance(event, Finished):
            return

        self._handles.close(handle)
        if event.exit != Exit.SUCCESS:
            error = handle.context.get("error") or UpdatesError(
                "Getting updates failed", event.exit.value
            )
            self._fail_check(error)
            return

        snapshot = self._catalog.commit()
        logger.info(
            "Update check finished: %d updates (%d security, %d important)",
            snapshot.count,
            snapshot.security_count,
            snapshot.important_count,
        )
        manual = self._current_check.manual if self._current_check else False
        self._outcome = CheckOutcome.SUCCEEDED
        self._last_check_timestamp = datetime.now(UTC)
        self._activity = Activity.IDLE
        self._current_check = None
        self._progress.reset("Idle")
        self._publish()

        self.updates_changed.emit()
        if not manual and snapshot.count > 0 and snapshot.count != self._last_update_count:
            self.new_updates_available.emit(snapshot.count)
        self._last_update_count = snapshot.count
        self.done.emit()
        self._run_coalesced_check()

    def _fail_check(self, error: UpdatesError) -> None:
        manual = self._current_check.manual if self._current_check else False
        self._outcome = CheckOutcome.FAILED
        self._activity = Activity.IDLE
        self._current_check = None

        if error.kind == ErrorKind.NETWORK_UNAVAILABLE and not manual:
            logger.info("Automatic update check failed, no network: will retry when online")
            self._deferred_check = True
            self._progress.set_text("Your system is offline")
        else:
            logger.warning("Update check failed: %s", error)
            self._progress.set_text(error.title)
            self.error_occurred.emit(error)

        self._publish()
        self.done.emit()
        self._run_coalesced_check()

    def _run_coalesced_check(self, default: CheckRequest | None = None) -> None:
        request = self._coalesced_check or default
        self._coalesced_check = None
        if request is not None:
            logger.debug("Running follow-up check %s", request)
            self.check_updates(force=request.force, manual=request.manual)

    # =========================================================================
    # Install and license agreements
    # =========================================================================

    def _reject(self, error: UpdatesError) -> None:
        logger.warning("Install rejected: %s", error)
        self.error_occurred.emit(error)
        self.done.emit()

    def _submit_install(self, request: InstallRequest) -> None:
        self._open(
            HandleKind.INSTALL,
            self._daemon.update_packages(sorted(request.package_ids), request.flags),
            request=request,
        )
        self._activity = Activity.INSTALLING_UPDATES
        self._progress.reset("Installing updates")
        self._publish()

    def _on_install_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        request: InstallRequest = handle.context["request"]

        if isinstance(event, ErrorReported) and event.code == ErrorCode.NO_LICENSE_AGREEMENT:
            logger.debug("Install needs a license agreement: %s", event.details)
            handle.context.setdefault("error", EulaRequiredError(
                "The license agreement failed", event.details, code=event.code
            ))
            return
        if self._on_common_event(handle, event):
            return

        if isinstance(event, PackageReported):
            self._on_package_updating(event)
        elif isinstance(event, EulaRequired):
            handle.context["eula_reported"] = True
            self._pending_install = request
            self._eulas.enqueue(
                EulaRequest(
                    eula_id=event.eula_id,
                    package_id=event.package_id,
                    vendor=event.vendor,
                    license_text=event.license_agreement,
                )
            )
        elif isinstance(event, RestartRequired):
            logger.info("Restart %s required by %s", event.restart.value, event.package_id)
            if event.restart in _RESTARTS_TO_ANNOUNCE:
                self.restart_required.emit(event.restart, event.package_id)
        elif isinstance(event, Finished):
            self._handles.close(handle)
            self._on_install_finished(handle, request, event)

    def _on_package_updating(self, event: PackageReported) -> None:
        percentage = self._progress.effective_percentage()
        name = package_name(event.package_id)
        if percentage is None:
            text = f"{info_present(event.info)} {name}"
        else:
            text = f"{info_present(event.info)} {name} ({percentage}%)"
        if self._progress.set_text(text):
            self._publish()

    def _on_install_finished(
        self,
        handle: TransactionHandle,
        request: InstallRequest,
        event: Finished,
    ) -> None:
        logger.info(
            "Install transaction finished with %s in %.1fs",
            event.exit.value,
            event.runtime_ms / 1000,
        )

        if handle.context.get("eula_reported"):
            # License agreements were reported during this attempt
            if self._eulas:
                logger.info("Install suspended until %d EULA(s) are answered", len(self._eulas))
                self._progress.set_text("Waiting for license agreement")
                self._publish()
            else:
                self._resubmit_pending_install()
            return

        if event.exit == Exit.SUCCESS and request.simulate:
            logger.info("Simulation succeeded, installing for real")
            self._submit_install(replace(request, simulate=False))
            return

        if (
            event.exit == Exit.NEED_UNTRUSTED
            and self._config.allow_untrusted_retry
            and not request.allow_untrusted
        ):
            logger.info("Install needs untrusted packages, retrying without trust check")
            self._submit_install(replace(request, simulate=False, allow_untrusted=True))
            return

        if event.exit == Exit.SUCCESS:
            self._finish_install(request)
            return

        error = handle.context.get("error")
        if error is None and event.exit == Exit.EULA_REQUIRED:
            error = EulaRequiredError("The license agreement failed")
        if error is None:
            error = UpdatesError("Installing updates failed", event.exit.value)
        self._fail_install(error)

    def _on_eula_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        if isinstance(event, ErrorReported):
            handle.context.setdefault("error", make_error(event.code, event.details))
            return
        if not isinstance(event, Finished):
            return

        self._handles.close(handle)
        eula_id = handle.context["eula_id"]
        if event.exit != Exit.SUCCESS:
            logger.warning("Accepting EULA %s failed: %s", eula_id, event.exit.value)
            self._fail_install(
                handle.context.get("error")
                or UpdatesError("Accepting the license agreement failed", event.exit.value)
            )
            return

        if self._eulas.is_head(eula_id):
            self._eulas.resolve_head(True)  # surfaces the next agreement, if any
        if not self._eulas and not self._handles.is_open(HandleKind.INSTALL):
            self._resubmit_pending_install()
        else:
            self._publish()

    def _resubmit_pending_install(self) -> None:
        request = self._pending_install
        if request is None:
            return
        logger.info("All license agreements accepted, restarting install")
        self._submit_install(request)

    def _finish_install(self, request: InstallRequest) -> None:
        logger.info("Installed %d update(s)", len(request.package_ids))
        self._pending_install = None
        self._activity = Activity.IDLE
        self._progress.reset("Updates installed")
        self._publish()
        self.updates_installed.emit(sorted(request.package_ids))
        self.done.emit()
        # The catalog is stale now
        self._run_coalesced_check(default=CheckRequest(force=False, manual=False))

    def _fail_install(self, error: UpdatesError) -> None:
        logger.warning("Install failed: %s", error)
        install = self._handles.get(HandleKind.INSTALL)
        if install is not None:
            install.cancel()
        self._handles.close_kind(HandleKind.INSTALL)
        self._handles.close_kind(HandleKind.EULA)
        self._eulas.clear()
        self._pending_install = None
        self._activity = Activity.IDLE
        self._progress.set_text(error.title)
        self._publish()
        self.error_occurred.emit(error)
        self.done.emit()
        self._run_coalesced_check()

    # =========================================================================
    # Update details
    # =========================================================================

    def _on_detail_event(self, handle: TransactionHandle, event: TransactionEvent) -> None:
        if isinstance(event, UpdateDetailReported):
            logger.debug("Got update details for %s", event.package_id)
            self.update_detail.emit(
                UpdateDetail(
                    package_id=event.package_id,
                    update_text=event.update_text,
                    urls=(*event.vendor_urls, *event.bugzilla_urls, *event.cve_urls),
                )
            )
        elif isinstance(event, ErrorReported):
            logger.warning(
                "Getting details for %s failed: %s",
                handle.context.get("package_id"),
                event.details or event.code.value,
            )
        elif isinstance(event, Finished):
            self._handles.close(handle)

    # =========================================================================
    # Snapshot
    # =========================================================================

    def _build_snapshot(self) -> UpdatesSnapshot:
        return UpdatesSnapshot.build(
            catalog=self._catalog.snapshot,
            activity=self._activity,
            outcome=self._outcome,
            percentage=self._progress.effective_percentage(),
            status_message=self._progress.status_text,
            last_check_timestamp=self._last_check_timestamp,
            network_state=self._network_state,
            on_battery=self._on_battery,
        )

    def _publish(self) -> None:
        snapshot = self._build_snapshot()
        changed = changed_fields(self._snapshot, snapshot)
        if not changed:
            return
        self._snapshot = snapshot
        self.snapshot_changed.emit(snapshot, changed)
