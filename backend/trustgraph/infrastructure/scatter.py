"""Scatter/Gather — run N independent async tasks, each with its own timeout.

Invariants:
    - One Outcome per factory, in factory order
    - A failure or timeout in one task never cancels or fails its siblings
    - At most `limit` tasks run at once (semaphore), all when limit is None
    - CancelledError of the caller still propagates (only task errors are captured)

Design Decisions:
    - Factories instead of coroutines: nothing starts before its semaphore slot opens
    - Outcome carries the exception object: callers decide what to log, nothing is raised
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one scattered task: a value or the error it died with."""
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def scatter_gather(
    factories: Sequence[Callable[[], Awaitable[T]]],
    *,
    timeout: float | None = None,
    limit: int | None = None,
) -> list[Outcome[T]]:
    """Launch every factory, await all, collect an Outcome for each."""
    if not factories:
        return []
    semaphore = asyncio.Semaphore(limit or len(factories))

    async def run(factory: Callable[[], Awaitable[T]]) -> Outcome[T]:
        async with semaphore:
            try:
                if timeout is None:
                    return Outcome(value=await factory())
                return Outcome(value=await asyncio.wait_for(factory(), timeout))
            except asyncio.CancelledError:
                raise
            except Exception as e:
                return Outcome(error=e)

    return list(await asyncio.gather(*(run(f) for f in factories)))
