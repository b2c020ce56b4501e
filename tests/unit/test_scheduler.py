"""
Unit tests for the task scheduler and EPG refresh task.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from tests.fixtures.samples import EPG_URL
from xtreamepg.config import EPGConfig
from xtreamepg.epg.service import EPGService
from xtreamepg.tasks.epg_tasks import refresh_epg_task
from xtreamepg.tasks.scheduler import ScheduledTask, TaskScheduler


@pytest.mark.unit
class TestScheduledTask:
    """Tests for ScheduledTask."""

    def test_next_run_from_last_run_start(self):
        task = ScheduledTask(name="t", func=MagicMock(), interval_seconds=86400)
        task.last_run = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

        assert task.calculate_next_run() == datetime(2024, 1, 2, 9, 0, 0, tzinfo=timezone.utc)

    def test_to_dict(self):
        task = ScheduledTask(name="t", func=MagicMock(), interval_seconds=60)

        data = task.to_dict()

        assert data["name"] == "t"
        assert data["interval_seconds"] == 60
        assert data["last_run"] is None
        assert data["run_count"] == 0


@pytest.mark.unit
class TestTaskScheduler:
    """Tests for TaskScheduler."""

    def test_add_task_schedules_after_interval(self):
        scheduler = TaskScheduler()
        before = datetime.now(timezone.utc)

        scheduler.add_task("t", AsyncMock(), 3600)

        task = scheduler.get_task("t")
        assert task.next_run >= before + timedelta(seconds=3600)

    def test_add_task_run_immediately(self):
        scheduler = TaskScheduler()

        scheduler.add_task("t", AsyncMock(), 3600, True)

        assert scheduler.get_task("t").next_run <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_schedule_kept_in_utc(self):
        scheduler = TaskScheduler()
        scheduler.add_task("t", AsyncMock(), 60)

        await scheduler.run_task("t")

        task = scheduler.get_task("t")
        assert task.last_run.tzinfo is timezone.utc
        assert task.next_run.tzinfo is timezone.utc

    def test_remove_task(self):
        scheduler = TaskScheduler()
        scheduler.add_task("t", AsyncMock(), 60)

        assert scheduler.remove_task("t") is True
        assert scheduler.remove_task("t") is False
        assert scheduler.get_tasks() == []

    @pytest.mark.asyncio
    async def test_run_task_passes_arguments(self):
        func = AsyncMock(return_value={"ok": True})
        scheduler = TaskScheduler()
        scheduler.add_task("t", func, 60, False, "arg")

        assert await scheduler.run_task("t") is True

        func.assert_awaited_once_with("arg")
        task = scheduler.get_task("t")
        assert task.run_count == 1
        assert task.last_result == {"ok": True}
        assert task.next_run == task.last_run + timedelta(seconds=60)

    @pytest.mark.asyncio
    async def test_run_unknown_task(self):
        assert await TaskScheduler().run_task("missing") is False

    @pytest.mark.asyncio
    async def test_failing_task_is_contained(self):
        func = AsyncMock(side_effect=RuntimeError("boom"))
        scheduler = TaskScheduler()
        scheduler.add_task("t", func, 60)

        await scheduler.run_task("t")

        task = scheduler.get_task("t")
        assert task.failure_count == 1
        assert task.run_count == 0
        assert task.is_running is False

    @pytest.mark.asyncio
    async def test_sync_function(self):
        func = MagicMock(return_value=3)
        scheduler = TaskScheduler()
        scheduler.add_task("t", func, 60)

        await scheduler.run_task("t")

        func.assert_called_once_with()
        assert scheduler.get_task("t").last_result == 3

    @pytest.mark.asyncio
    async def test_loop_runs_immediate_task_once(self):
        func = AsyncMock()
        scheduler = TaskScheduler()
        scheduler.add_task("t", func, 3600, True)

        await scheduler.start()
        try:
            for _ in range(50):
                if func.await_count:
                    break
                await asyncio.sleep(0.02)
            await asyncio.sleep(0.05)
        finally:
            await scheduler.stop()

        assert func.await_count == 1
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_start_and_stop_idempotent(self):
        scheduler = TaskScheduler()

        await scheduler.start()
        await scheduler.start()
        await scheduler.stop()
        await scheduler.stop()

        assert scheduler.is_running is False


@pytest.mark.unit
class TestRefreshEPGTask:
    """Tests for refresh_epg_task."""

    @pytest.mark.asyncio
    async def test_reports_refresh(self, make_transport):
        service = EPGService(
            EPGConfig(url=EPG_URL),
            http_client=httpx.AsyncClient(transport=make_transport()),
        )

        summary = await refresh_epg_task(service)

        # Sample schedule is in the past relative to the wall clock
        assert summary["status"] == "ok"
        assert summary["error"] is None
        assert summary["last_refresh"] is not None

    @pytest.mark.asyncio
    async def test_reports_skip(self):
        service = EPGService(EPGConfig(url=None))

        summary = await refresh_epg_task(service)

        assert summary["status"] == "skipped"
        assert summary["channel_count"] == 0
