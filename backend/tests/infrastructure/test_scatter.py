"""Scatter/Gather — verifies per-task outcomes, timeouts and the concurrency limit."""

import asyncio

import pytest

from trustgraph.infrastructure.scatter import Outcome, scatter_gather


async def _value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def _boom():
    raise RuntimeError("relay down")


async def test_outcomes_keep_factory_order():
    outcomes = await scatter_gather([
        lambda: _value("slow", 0.05), lambda: _value("fast"),
    ])
    assert [o.value for o in outcomes] == ["slow", "fast"]
    assert all(o.ok for o in outcomes)


async def test_one_failure_does_not_fail_siblings():
    outcomes = await scatter_gather([_boom, lambda: _value(1)])
    assert not outcomes[0].ok
    assert isinstance(outcomes[0].error, RuntimeError)
    assert outcomes[1] == Outcome(value=1)


async def test_timeout_is_per_task():
    outcomes = await scatter_gather(
        [lambda: _value("late", 1.0), lambda: _value("on time")], timeout=0.05,
    )
    assert isinstance(outcomes[0].error, asyncio.TimeoutError)
    assert outcomes[1].value == "on time"


async def test_limit_bounds_concurrency():
    running = 0
    peak = 0

    async def tracked():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1

    await scatter_gather([tracked] * 6, limit=2)
    assert peak == 2


async def test_no_factories_no_outcomes():
    assert await scatter_gather([]) == []


async def test_caller_cancellation_propagates():
    task = asyncio.create_task(scatter_gather([lambda: _value(1, 10)]))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
