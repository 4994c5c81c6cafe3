from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from app.application.exceptions import TerminalAutomationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    action: Callable[[], Awaitable[T]],
    *,
    retries: int = 3,
    delay: float = 1.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    label: str | None = None,
) -> T:
    """
    Await ``action`` and re-invoke it after a fixed ``delay`` (seconds) when it fails.

    A budget of ``retries`` allows at most ``retries + 1`` invocations; the last error is
    re-raised once the budget is spent. Terminal automation errors and errors outside
    ``retry_on`` are raised immediately.
    """
    name = label or getattr(action, "__name__", "action")
    attempt = 0
    while True:
        attempt += 1
        try:
            return await action()
        except TerminalAutomationError:
            raise
        except retry_on as e:
            if attempt > retries:
                logger.error(
                    "Retries exhausted",
                    extra={"step": name, "attempt": attempt, "error": str(e)},
                )
                raise
            logger.warning(
                "Attempt failed, retrying",
                extra={"step": name, "attempt": attempt, "error": str(e)},
            )
            await asyncio.sleep(delay)
