from __future__ import annotations

import asyncio

import pytest

from app.application.exceptions import NoSlotsAvailableError
from app.application.utils import retry as retry_module
from app.application.utils.retry import retry_async


class Flaky:
    def __init__(self, failures: int, error: Exception | None = None) -> None:
        self.failures = failures
        self.error = error or RuntimeError("element not rendered")
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


@pytest.fixture
def sleeps(monkeypatch):
    recorded: list[float] = []

    async def fake_sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)
    return recorded


def test_first_success_returns_without_delay(sleeps):
    action = Flaky(failures=0)

    assert asyncio.run(retry_async(action)) == "ok"
    assert action.calls == 1
    assert sleeps == []


def test_recovers_after_transient_failures(sleeps):
    action = Flaky(failures=2)

    assert asyncio.run(retry_async(action, retries=3, delay=0.25)) == "ok"
    assert action.calls == 3
    assert sleeps == [0.25, 0.25]


@pytest.mark.parametrize("budget", [0, 1, 3, 5])
def test_budget_n_means_n_plus_one_attempts(sleeps, budget):
    action = Flaky(failures=100)

    with pytest.raises(RuntimeError, match="element not rendered"):
        asyncio.run(retry_async(action, retries=budget, delay=1.0))

    assert action.calls == budget + 1
    assert sleeps == [1.0] * budget


def test_terminal_errors_are_not_retried(sleeps):
    action = Flaky(failures=100, error=NoSlotsAvailableError("no dates"))

    with pytest.raises(NoSlotsAvailableError):
        asyncio.run(retry_async(action, retries=3))

    assert action.calls == 1
    assert sleeps == []


def test_errors_outside_retry_on_propagate_immediately(sleeps):
    action = Flaky(failures=100, error=KeyError("boom"))

    with pytest.raises(KeyError):
        asyncio.run(retry_async(action, retries=3, retry_on=(RuntimeError,)))

    assert action.calls == 1
