"""
Aggregation Scheduler
A cancellable periodic task: every tick it scans all jobs and runs the due
ones one after another. Due-ness is coarse (see AggregationJob.is_due), so a
job may start up to one tick interval after its nominal due time.
"""

import asyncio
from datetime import datetime
from typing import List, Optional

import structlog

from .aggregator import NewsAggregator

logger = structlog.get_logger(__name__)


class AggregationScheduler:

    def __init__(self, aggregator: NewsAggregator, interval_seconds: float = 3600):
        self.aggregator = aggregator
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="news-aggregation-scheduler")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def check_scheduled_jobs(self, now: Optional[datetime] = None) -> List[str]:
        """Run every due job sequentially. Returns the ids of the jobs that were started."""
        now = now or self.aggregator.clock()
        started = []

        for job in self.aggregator.list_jobs():
            if not job.is_due(now):
                continue
            started.append(job.id)
            await self.aggregator.run_job(job)

        if started:
            logger.info("scheduler_tick_completed", jobs_run=len(started))
        return started

    async def _run_loop(self) -> None:
        logger.info("scheduler_started", interval_seconds=self.interval_seconds)
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                try:
                    await self.check_scheduled_jobs()
                except Exception as e:
                    logger.error("scheduler_tick_failed", error=str(e), exc_info=True)
        finally:
            logger.info("scheduler_stopped")
