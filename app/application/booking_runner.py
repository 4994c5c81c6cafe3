from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from app.application.exceptions import RunnerSaturatedError
from app.domain.entities.form_details import FormDetails

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingJob:
    booking_id: int
    scheduling_url: str
    details: FormDetails


class BookingExecutor(Protocol):
    async def execute(self, booking_id: int, scheduling_url: str, details: FormDetails) -> object: ...


class BookingRunner:
    """
    Bounded pool of worker coroutines pulling booking jobs from a queue.

    At most ``workers`` browser sessions run at once and at most ``queue_size`` jobs
    wait; ``submit`` refuses work beyond that instead of spawning untracked tasks.
    """

    def __init__(self, executor: BookingExecutor, *, workers: int = 2, queue_size: int = 20) -> None:
        if workers < 1:
            raise ValueError("BookingRunner needs at least one worker")
        self._executor = executor
        self._worker_count = workers
        self._queue: "asyncio.Queue[BookingJob]" = asyncio.Queue(maxsize=max(queue_size, 1))
        self._workers: list[asyncio.Task[None]] = []
        self._shutdown = asyncio.Event()

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._workers)

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._shutdown.clear()
        self._workers = [
            loop.create_task(self._worker(index), name=f"booking-worker-{index}")
            for index in range(self._worker_count)
        ]
        logger.info("Booking runner started", extra={"workers": self._worker_count})

    async def stop(self) -> None:
        self._shutdown.set()
        if self._workers:
            await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        if not self._queue.empty():
            logger.warning("Booking runner stopped with jobs still queued", extra={"pending": self._queue.qsize()})

    def has_capacity(self) -> bool:
        return not self._queue.full()

    def submit(self, job: BookingJob) -> None:
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull as e:
            raise RunnerSaturatedError("Too many bookings in progress, try again later") from e
        logger.info("Booking job queued", extra={"booking_id": job.booking_id, "pending": self._queue.qsize()})

        if not self.running:
            try:
                self.start()
            except RuntimeError:
                # No running loop; the job waits for an explicit start().
                pass

    async def join(self) -> None:
        await self._queue.join()

    async def _worker(self, index: int) -> None:
        while not self._shutdown.is_set():
            try:
                job = await asyncio.wait_for(self._queue.get(), timeout=0.5)
            except asyncio.TimeoutError:
                continue

            try:
                await self._executor.execute(job.booking_id, job.scheduling_url, job.details)
            except Exception as e:
                logger.warning(
                    "Booking job failed",
                    extra={"booking_id": job.booking_id, "worker": index, "error": str(e)},
                )
            finally:
                self._queue.task_done()
