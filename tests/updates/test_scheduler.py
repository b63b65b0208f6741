"""Tests for the automatic update check scheduler."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from pkupdates.core.config import UpdatesConfig
from pkupdates.daemon.types import NetworkState, Role
from pkupdates.updates.coordinator import TransactionCoordinator
from pkupdates.updates.scheduler import UpdateCheckScheduler, should_check_automatically
from tests.fakes import FakeDaemon


class TestShouldCheckAutomatically:
    """Tests for the power/network policy."""

    def test_plugged_in_on_wired(self) -> None:
        assert should_check_automatically(UpdatesConfig(), False, False) is True

    def test_battery_skipped_by_default(self) -> None:
        assert should_check_automatically(UpdatesConfig(), True, False) is False

    def test_battery_allowed(self) -> None:
        config = UpdatesConfig(check_on_battery=True)
        assert should_check_automatically(config, True, False) is True

    def test_mobile_skipped_by_default(self) -> None:
        assert should_check_automatically(UpdatesConfig(), False, True) is False

    def test_mobile_allowed(self) -> None:
        config = UpdatesConfig(check_on_mobile=True)
        assert should_check_automatically(config, False, True) is True


class TestUpdateCheckScheduler:
    """Tests for UpdateCheckScheduler."""

    def test_run_now_starts_automatic_check(
        self,
        coordinator: TransactionCoordinator,
        daemon: FakeDaemon,
    ) -> None:
        assert UpdateCheckScheduler(coordinator).run_now() is True
        assert daemon.last(Role.REFRESH_CACHE).args == {"force": False}

    def test_run_now_skipped_on_battery(
        self,
        coordinator: TransactionCoordinator,
        daemon: FakeDaemon,
    ) -> None:
        coordinator.set_on_battery(True)

        assert UpdateCheckScheduler(coordinator).run_now() is False
        assert daemon.transactions == []

    def test_run_now_skipped_on_mobile(
        self,
        coordinator: TransactionCoordinator,
        daemon: FakeDaemon,
    ) -> None:
        coordinator.set_network_state(NetworkState.MOBILE)

        assert UpdateCheckScheduler(coordinator).run_now() is False
        assert daemon.transactions == []

    def test_check_job_uses_run_now(self) -> None:
        coordinator = MagicMock()
        coordinator.config = UpdatesConfig()
        coordinator.is_on_battery = False
        coordinator.is_network_mobile = False

        UpdateCheckScheduler(coordinator)._check_job()

        coordinator.check_updates.assert_called_once_with(force=False, manual=False)

    @pytest.mark.asyncio
    async def test_start_and_stop(self, daemon: FakeDaemon) -> None:
        coordinator = TransactionCoordinator(daemon, config=UpdatesConfig(check_interval=3600))
        scheduler = UpdateCheckScheduler(coordinator)

        scheduler.start()
        try:
            assert scheduler.running is True
            job = scheduler._scheduler.get_job(UpdateCheckScheduler.JOB_ID)
            assert job is not None
            assert job.trigger.interval == timedelta(seconds=3600)

            scheduler.start()  # already running
            assert len(scheduler._scheduler.get_jobs()) == 1
        finally:
            scheduler.stop()

        assert scheduler.running is False
        assert daemon.transactions == []

    def test_stop_when_not_running(self, coordinator: TransactionCoordinator) -> None:
        scheduler = UpdateCheckScheduler(coordinator)
        scheduler.stop()
        assert scheduler.running is False
