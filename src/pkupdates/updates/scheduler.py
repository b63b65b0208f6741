"""Scheduler for automatic update checks.

This module provides:
- should_check_automatically: Power/network policy for automatic checks
- UpdateCheckScheduler: Periodic automatic checks on the coordinator's loop
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from pkupdates.core.config import UpdatesConfig
    from pkupdates.updates.coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


def should_check_automatically(
    config: UpdatesConfig,
    on_battery: bool,
    network_mobile: bool,
) -> bool:
    """Whether an automatic check may run now.

    Args:
        config: Configuration with the battery/mobile policy.
        on_battery: Running on battery.
        network_mobile: Connected through a mobile network.

    Returns:
        False if the check should be skipped.
    """
    if on_battery and not config.check_on_battery:
        return False
    if network_mobile and not config.check_on_mobile:
        return False
    return True


class UpdateCheckScheduler:
    """Runs automatic (non-forced, non-manual) checks every check_interval.

    Must be started from the event loop running the coordinator.
    """

    JOB_ID = "automatic_update_check"

    def __init__(self, coordinator: TransactionCoordinator) -> None:
        """Initialize the scheduler.

        Args:
            coordinator: Coordinator to run checks on; its config provides the
                interval and the power/network policy.
        """
        self._coordinator = coordinator
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def _check_job(self) -> None:
        """Job function for scheduled update checks."""
        if not self.run_now():
            logger.info("Skipping automatic update check (battery or mobile network)")

    def start(self) -> None:
        """Start the scheduler."""
        if self._scheduler is not None:
            return  # Already running

        interval = self._coordinator.config.check_interval
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._check_job,
            trigger=IntervalTrigger(seconds=interval),
            id=self.JOB_ID,
            name="Automatic update check",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Update check scheduler started (every %ds)", interval)

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Update check scheduler stopped")

    def run_now(self) -> bool:
        """Run an automatic check now if the power/network policy allows it.

        Returns:
            True if a check was requested.
        """
        coordinator = self._coordinator
        if not should_check_automatically(
            coordinator.config,
            on_battery=coordinator.is_on_battery,
            network_mobile=coordinator.is_network_mobile,
        ):
            return False
        coordinator.check_updates(force=False, manual=False)
        return True
