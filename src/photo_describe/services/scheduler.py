"""Delayed one-shot job scheduling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

Job = Callable[[Any], Awaitable[object]]


class JobScheduler(Protocol):
    """Interface for scheduling a job to run once after a delay."""

    def schedule(self, delay_ms: int, job: Job, payload: object) -> None:
        """Run ``job(payload)`` once after ``delay_ms`` milliseconds."""


@dataclass
class AsyncioJobScheduler(JobScheduler):
    """Scheduler that runs jobs as tasks on the running event loop.

    Jobs cannot be cancelled once scheduled. A job that raises is logged and
    dropped; nothing is retried.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    _tasks: set[asyncio.Task] = field(default_factory=set)

    def schedule(self, delay_ms: int, job: Job, payload: object) -> None:
        """Schedule a job on the running loop."""
        task = asyncio.get_running_loop().create_task(
            self._run_after(delay_ms, job, payload)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        """Number of jobs that have not finished yet."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled job to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_after(self, delay_ms: int, job: Job, payload: object) -> None:
        await asyncio.sleep(max(delay_ms, 0) / 1000)
        try:
            await job(payload)
        except Exception:
            self.logger.exception(
                "scheduled_job_failed",
                extra={"job": getattr(job, "__qualname__", repr(job))},
            )
