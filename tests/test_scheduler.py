"""Tests for the asyncio job scheduler."""

import asyncio
import logging

from photo_describe.services.scheduler import AsyncioJobScheduler


def test_scheduler_runs_job_once_with_payload() -> None:
    seen: list[object] = []

    async def job(payload: object) -> None:
        seen.append(payload)

    async def main() -> None:
        scheduler = AsyncioJobScheduler()
        scheduler.schedule(10, job, "photo-1")
        assert seen == []
        assert scheduler.pending == 1
        await scheduler.drain()
        assert scheduler.pending == 0

    asyncio.run(main())

    assert seen == ["photo-1"]


def test_scheduler_waits_for_delay() -> None:
    order: list[str] = []

    async def job(payload: object) -> None:
        order.append(str(payload))

    async def main() -> None:
        scheduler = AsyncioJobScheduler()
        scheduler.schedule(50, job, "late")
        scheduler.schedule(0, job, "early")
        await scheduler.drain()

    asyncio.run(main())

    assert order == ["early", "late"]


def test_failing_job_is_logged_and_dropped(caplog) -> None:
    async def job(payload: object) -> None:
        raise RuntimeError("boom")

    logger = logging.getLogger("tests.scheduler")

    async def main() -> None:
        scheduler = AsyncioJobScheduler(logger=logger)
        scheduler.schedule(0, job, None)
        await scheduler.drain()

    with caplog.at_level(logging.ERROR, logger="tests.scheduler"):
        asyncio.run(main())

    assert any(record.getMessage() == "scheduled_job_failed" for record in caplog.records)
