"""
Interval scheduler for background tasks.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Upper bound on a single sleep so stop() and newly added tasks are noticed
MAX_TICK_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScheduledTask:
    """A task that runs every interval_seconds."""

    name: str
    func: Callable
    interval_seconds: int
    args: tuple = field(default_factory=tuple)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    run_count: int = 0
    failure_count: int = 0
    is_running: bool = False
    last_result: Any = None

    def calculate_next_run(self) -> datetime:
        """Next run is one interval after the last run started."""
        base = self.last_run or _utcnow()
        return base + timedelta(seconds=self.interval_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "interval_seconds": self.interval_seconds,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "next_run": self.next_run.isoformat() if self.next_run else None,
            "run_count": self.run_count,
            "failure_count": self.failure_count,
            "is_running": self.is_running,
        }


class TaskScheduler:
    """
    Runs registered coroutines on fixed intervals.

    Intervals are counted from each run's start time, so a task added
    with run_immediately=True fires at start-up and then every
    interval_seconds from there. There is no calendar alignment.
    """

    def __init__(self):
        self._tasks: Dict[str, ScheduledTask] = {}
        self._running = False
        self._scheduler_task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._running

    def add_task(
        self,
        name: str,
        func: Callable,
        interval_seconds: int,
        run_immediately: bool = False,
        *args,
        **kwargs,
    ) -> None:
        """
        Register a task.

        Args:
            name: Unique task name
            func: Async (or plain) callable to execute
            interval_seconds: Run interval in seconds
            run_immediately: Run once as soon as the scheduler starts
            args: Function arguments
            kwargs: Function keyword arguments
        """
        task = ScheduledTask(
            name=name,
            func=func,
            interval_seconds=interval_seconds,
            args=args,
            kwargs=kwargs,
        )

        if run_immediately:
            task.next_run = _utcnow()
        else:
            task.next_run = _utcnow() + timedelta(seconds=interval_seconds)

        self._tasks[name] = task
        logger.info(f"Scheduled task added: {name} (every {interval_seconds}s)")

    def remove_task(self, name: str) -> bool:
        if name in self._tasks:
            del self._tasks[name]
            logger.info(f"Scheduled task removed: {name}")
            return True
        return False

    async def start(self) -> None:
        """Start the scheduler loop."""
        if self._running:
            return

        self._running = True
        self._scheduler_task = asyncio.create_task(self._scheduler_loop())
        logger.info("Task scheduler started")

    async def stop(self) -> None:
        """Stop the loop and cancel runs still in flight."""
        if not self._running:
            return

        self._running = False

        pending = [t for t in (self._scheduler_task, *self._inflight) if t is not None]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()

        logger.info("Task scheduler stopped")

    async def run_task(self, name: str) -> bool:
        """Run a registered task now, outside its schedule."""
        task = self._tasks.get(name)
        if not task:
            return False

        await self._execute_task(task)
        return True

    def get_task(self, name: str) -> Optional[ScheduledTask]:
        return self._tasks.get(name)

    def get_tasks(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self._tasks.values()]

    async def _scheduler_loop(self) -> None:
        while self._running:
            try:
                now = _utcnow()

                for task in list(self._tasks.values()):
                    if task.next_run and task.next_run <= now and not task.is_running:
                        # Mark before the run starts so the next tick skips it
                        task.is_running = True
                        run = asyncio.create_task(self._execute_task(task))
                        self._inflight.add(run)
                        run.add_done_callback(self._inflight.discard)

                await asyncio.sleep(self._seconds_until_next(now))

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Scheduler error: {e}")
                await asyncio.sleep(5)

    def _seconds_until_next(self, now: datetime) -> float:
        upcoming = [
            (t.next_run - now).total_seconds()
            for t in self._tasks.values()
            if t.next_run and not t.is_running
        ]
        if not upcoming:
            return MAX_TICK_SECONDS
        return max(0.0, min(min(upcoming), MAX_TICK_SECONDS))

    async def _execute_task(self, task: ScheduledTask) -> None:
        task.is_running = True
        task.last_run = _utcnow()

        try:
            logger.debug(f"Running scheduled task: {task.name}")

            if inspect.iscoroutinefunction(task.func):
                task.last_result = await task.func(*task.args, **task.kwargs)
            else:
                task.last_result = task.func(*task.args, **task.kwargs)

            task.run_count += 1
            logger.debug(f"Scheduled task completed: {task.name}")

        except Exception as e:
            task.failure_count += 1
            logger.error(f"Scheduled task failed: {task.name}: {e}")

        finally:
            task.is_running = False
            task.next_run = task.calculate_next_run()
