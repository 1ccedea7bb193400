"""Nostr Relay Transport — one-shot NIP-01 REQ over an aiohttp WebSocket.

Invariants:
    - One WebSocket per call, always closed on exit (CLOSE frame sent best-effort)
    - The whole call (connect included) is bounded by `timeout`
    - EOSE for our subscription ends the call with the latest event (possibly None)
    - Deadline, CLOSED or a dropped connection before EOSE return the latest event
      if one arrived, otherwise raise RelayError: "no answer" is never "no follows"
    - Only EVENT frames for our subscription id are considered
    - Connect failures and WebSocket error frames raise RelayError (core/errors.py)
    - Unparseable frames are logged and skipped

Design Decisions:
    - Shared aiohttp.ClientSession created lazily, closed by close(): one connector
      pool per process instead of one per relay call
    - Deadline loop around ws.receive() instead of a separate timer task: the partial
      result is just the local variable at the time the loop exits
"""

import asyncio
import json
import logging
import uuid

import aiohttp
from aiohttp import WSMsgType

from trustgraph.core.errors import RelayError
from trustgraph.core.follow_extraction import newer_event

logger = logging.getLogger(__name__)


class AiohttpRelayTransport:
    """RelayTransport implementation backed by aiohttp WebSockets."""

    def __init__(self, connect_timeout: float = 5.0, heartbeat: float = 30.0):
        self.connect_timeout = connect_timeout
        self.heartbeat = heartbeat
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def fetch_latest_event(
        self, relay_url: str, filter_: dict, timeout: float,
    ) -> dict | None:
        """Send REQ, keep the newest EVENT until EOSE/CLOSED/deadline."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        sub_id = f"follows-{uuid.uuid4().hex[:12]}"

        ws = await self._connect(relay_url, min(timeout, self.connect_timeout))
        latest: dict | None = None
        unfinished: str | None = None
        try:
            await ws.send_json(["REQ", sub_id, filter_])
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    unfinished = "timed out before EOSE"
                    break
                try:
                    msg = await asyncio.wait_for(ws.receive(), remaining)
                except asyncio.TimeoutError:
                    continue

                if msg.type == WSMsgType.TEXT:
                    frame = _parse_frame(msg.data, relay_url)
                    if frame is None:
                        continue
                    kind = frame[0]
                    if kind == "EVENT" and len(frame) >= 3 and frame[1] == sub_id:
                        latest = newer_event(latest, frame[2])
                    elif kind == "EOSE" and frame[1:2] == [sub_id]:
                        break
                    elif kind == "CLOSED" and frame[1:2] == [sub_id]:
                        unfinished = f"subscription closed: {frame[2:3]}"
                        break
                    elif kind == "NOTICE":
                        logger.info(
                            f"Relay notice from {relay_url}: {frame[1:2]}",
                            extra={"relay": relay_url},
                        )
                elif msg.type == WSMsgType.ERROR:
                    raise RelayError(relay_url, f"websocket error: {ws.exception()}")
                elif msg.type in (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED):
                    unfinished = "connection closed before EOSE"
                    break
        finally:
            await _close_subscription(ws, sub_id, relay_url)

        if unfinished is not None:
            if latest is None:
                raise RelayError(relay_url, unfinished)
            logger.debug(
                f"Relay {relay_url} {unfinished}, returning partial result",
                extra={"relay": relay_url},
            )
        return latest

    async def _connect(
        self, relay_url: str, timeout: float,
    ) -> aiohttp.ClientWebSocketResponse:
        try:
            return await asyncio.wait_for(
                self._get_session().ws_connect(relay_url, heartbeat=self.heartbeat),
                timeout,
            )
        except asyncio.TimeoutError as e:
            raise RelayError(relay_url, "connect timeout") from e
        except (aiohttp.ClientError, OSError, ValueError) as e:
            raise RelayError(relay_url, str(e) or type(e).__name__) from e

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


def _parse_frame(data: str, relay_url: str) -> list | None:
    """Decode one relay frame; None for anything that is not a JSON list."""
    try:
        frame = json.loads(data)
    except json.JSONDecodeError:
        logger.warning(
            f"Invalid JSON from relay {relay_url}", extra={"relay": relay_url},
        )
        return None
    if not isinstance(frame, list) or not frame:
        return None
    return frame


async def _close_subscription(
    ws: aiohttp.ClientWebSocketResponse, sub_id: str, relay_url: str,
) -> None:
    if not ws.closed:
        try:
            await ws.send_json(["CLOSE", sub_id])
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            logger.debug(f"CLOSE to {relay_url} not delivered: {e}")
    await ws.close()
