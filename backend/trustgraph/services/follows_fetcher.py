"""Follows Fetcher — follow lists straight from the relays, no cache involved.

Invariants:
    - Every configured relay is queried in parallel for each identity
    - Per relay only the newest kind-3 event counts; followees = union across relays
    - A relay that errors or times out only loses its own contribution (logged, absorbed)
    - Batch fetches run chunk by chunk (batch_size identities at a time); a chunk
      starts only after the previous one fully completed

Design Decisions:
    - FollowsFetchResult keeps relays_ok next to the follows: callers can tell
      "relays said nobody" from "no relay answered" and skip caching the latter.
      A relay counts as answered only after EOSE or once it delivered an event;
      timeouts and early closes come back from the transport as RelayError
    - scatter_gather timeout = relay timeout + grace: the transport returns partial
      results at its own deadline, the grace is a backstop for a stuck connect/close
"""

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from functools import partial

from trustgraph.core.follow_extraction import extract_follows, follow_list_filter
from trustgraph.core.repository_protocols import RelayTransport
from trustgraph.infrastructure.scatter import scatter_gather

logger = logging.getLogger(__name__)

_TIMEOUT_GRACE_SECONDS = 2.0


@dataclass
class FollowsFetchResult:
    """Union of followees across relays, plus how many relays answered."""
    follows: list[str] = field(default_factory=list)
    relays_ok: int = 0

    @property
    def reached_any_relay(self) -> bool:
        return self.relays_ok > 0


class FollowsFetcher:
    """Queries relays for kind-3 follow lists."""

    def __init__(
        self,
        transport: RelayTransport,
        relays: Sequence[str],
        timeout_seconds: float = 10.0,
        batch_size: int = 10,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.transport = transport
        self.relays = list(relays)
        self.timeout_seconds = timeout_seconds
        self.batch_size = batch_size

    async def fetch_follows(self, pubkey: str) -> list[str]:
        """Followees of pubkey, union over all relays."""
        return (await self.fetch_follows_result(pubkey)).follows

    async def fetch_follows_result(self, pubkey: str) -> FollowsFetchResult:
        outcomes = await scatter_gather(
            [partial(self._fetch_from_relay, relay, pubkey) for relay in self.relays],
            timeout=self.timeout_seconds + _TIMEOUT_GRACE_SECONDS,
        )

        union: dict[str, None] = {}
        relays_ok = 0
        for relay, outcome in zip(self.relays, outcomes):
            if not outcome.ok:
                logger.warning(
                    f"Failed to fetch follows from {relay}: {outcome.error}",
                    extra={"relay": relay, "pubkey": pubkey},
                )
                continue
            relays_ok += 1
            for followee in outcome.value or []:
                union.setdefault(followee)

        return FollowsFetchResult(follows=list(union), relays_ok=relays_ok)

    async def _fetch_from_relay(self, relay: str, pubkey: str) -> list[str]:
        event = await self.transport.fetch_latest_event(
            relay, follow_list_filter(pubkey), self.timeout_seconds,
        )
        return extract_follows(event)

    async def iter_follows_batches(
        self, pubkeys: Sequence[str],
    ) -> AsyncIterator[dict[str, FollowsFetchResult]]:
        """Yield one {pubkey: result} dict per completed chunk."""
        for start in range(0, len(pubkeys), self.batch_size):
            chunk = list(pubkeys[start:start + self.batch_size])
            outcomes = await scatter_gather(
                [partial(self.fetch_follows_result, pk) for pk in chunk],
            )
            results = {}
            for pubkey, outcome in zip(chunk, outcomes):
                if outcome.ok and outcome.value is not None:
                    results[pubkey] = outcome.value
                else:
                    logger.error(
                        f"Unexpected failure fetching follows: {outcome.error}",
                        extra={"pubkey": pubkey},
                    )
                    results[pubkey] = FollowsFetchResult()
            yield results

    async def fetch_follows_batch(
        self, pubkeys: Sequence[str],
    ) -> dict[str, list[str]]:
        """Followees for many identities, chunk-sequential."""
        merged: dict[str, list[str]] = {}
        async for chunk in self.iter_follows_batches(pubkeys):
            for pubkey, result in chunk.items():
                merged[pubkey] = result.follows
        return merged
