"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves
"""

from collections.abc import Sequence
from typing import Protocol


class RelayTransport(Protocol):
    """One-shot request/response-or-timeout against a single relay."""

    async def fetch_latest_event(
        self, relay_url: str, filter_: dict, timeout: float,
    ) -> dict | None:
        """Most recent matching event seen before EOSE or the deadline.

        None only when the relay finished (EOSE) without a match. Raises RelayError
        when the relay cannot be reached, errors out, or ends without EOSE and
        without delivering an event.
        """
        ...

    async def close(self) -> None: ...


class FollowsSource(Protocol):
    """Follow lists for many identities (cache first, relays on miss)."""

    async def get_follows_batch(
        self, pubkeys: Sequence[str],
    ) -> dict[str, list[str]]: ...
