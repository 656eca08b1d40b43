"""
Fixed-interval scheduler for poll cycles.

Starts a job at launch and then on a fixed cadence. Jobs run as background
tasks so a slow cycle never delays the next tick.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[Any]]


class PollScheduler:
    """
    Trigger a job every ``interval`` seconds.

    Ticks are computed from the start instant, so the cadence does not
    drift with the job's duration. With ``allow_overlap`` False, a tick
    that fires while the previous job is still running is skipped.
    """

    def __init__(self, job: Job, interval: float = 300, allow_overlap: bool = False):
        """
        Initialize the scheduler.

        Parameters
        ----------
        job : Callable[[], Awaitable]
            Coroutine function run on every tick.
        interval : float
            Seconds between two ticks.
        allow_overlap : bool
            If True, start a new job even while the previous one is running.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.job = job
        self.interval = interval
        self.allow_overlap = allow_overlap
        self._running = False
        self._jobs: set[asyncio.Task] = set()
        self._last_job: asyncio.Task | None = None
        self._runner: asyncio.Task | None = None
        self.skipped = 0

    @property
    def busy(self) -> bool:
        """True while the most recently started job is still running."""
        return self._last_job is not None and not self._last_job.done()

    def trigger(self) -> asyncio.Task | None:
        """
        Start the job in the background unless the overlap guard forbids it.

        Returns
        -------
        asyncio.Task | None
            The started job, or None if the tick was skipped.
        """
        if self.busy and not self.allow_overlap:
            self.skipped += 1
            logger.warning("Previous poll cycle still running, skipping this one")
            return None

        task = asyncio.create_task(self._run_job())
        self._jobs.add(task)
        task.add_done_callback(self._jobs.discard)
        self._last_job = task
        return task

    async def _run_job(self) -> None:
        """Run the job once, logging any failure."""
        logger.info("Poll cycle started")
        try:
            await self.job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Poll cycle failed: %s", e)
        else:
            logger.debug("Poll cycle finished")

    async def run(self) -> None:
        """Trigger the job now and then every interval until stopped."""
        loop = asyncio.get_running_loop()
        self._running = True
        self._runner = asyncio.current_task()
        start = loop.time()
        tick = 0

        while self._running:
            self.trigger()
            tick += 1
            delay = start + tick * self.interval - loop.time()
            await asyncio.sleep(max(delay, 0))

    async def stop(self) -> None:
        """Stop ticking and cancel any job still running."""
        self._running = False

        runner, self._runner = self._runner, None
        if runner is not None and runner is not asyncio.current_task():
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)

        jobs = list(self._jobs)
        for task in jobs:
            task.cancel()
        if jobs:
            await asyncio.gather(*jobs, return_exceptions=True)
