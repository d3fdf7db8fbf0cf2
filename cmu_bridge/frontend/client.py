"""Frontend client: composes the RPC channel with the command handler."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from dataclasses import dataclass

from cmu_bridge.protocol import RequestKind
from cmu_bridge.state.settings import AppSettings
from cmu_bridge.config.protocol import KEY_RESULT, KEY_INBOUND_STAMP, KEY_OUTBOUND_STAMP

from .commands import CommandHandler
from .host import ResourceHost
from .document import DocumentHost
from .channel import ConnectFn, RpcChannel
from .ids import ClockMs, wall_clock_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PingResult:
    lost: bool
    latency_ms: int = 0


def _latency_ms(frame: dict[str, Any]) -> int:
    try:
        return int(frame[KEY_OUTBOUND_STAMP]) - int(frame[KEY_INBOUND_STAMP])
    except (KeyError, TypeError, ValueError):
        return 0


class FrontendClient:
    """On every open: one liveness ping and one setup request.

    A setup that fails with an error reply is retried after a short delay while
    the connection stays open; a lost connection re-runs setup on the next open.
    """

    def __init__(
        self,
        settings: AppSettings,
        host: ResourceHost | None = None,
        *,
        connect_fn: ConnectFn | None = None,
        clock_ms: ClockMs | None = None,
    ) -> None:
        self._settings = settings
        self._clock_ms = clock_ms or wall_clock_ms
        self.host: ResourceHost = host if host is not None else DocumentHost()
        self.commands = CommandHandler(self.host)
        self.channel = RpcChannel(
            settings.network.url,
            settings.channel,
            on_open=self._on_open,
            on_command=self.commands.apply,
            connect_fn=connect_fn,
            clock_ms=clock_ms,
        )
        self.last_ping: PingResult | None = None
        self.setup_result: dict[str, Any] | None = None
        self._setup_retry: asyncio.Task | None = None

    def start(self) -> asyncio.Task:
        return self.channel.start()

    async def shutdown(self) -> None:
        await self._cancel_setup_retry()
        await self.channel.shutdown()

    async def _on_open(self) -> None:
        await self.ping()
        await self.setup()

    async def ping(self) -> bool:
        return await self.channel.send(RequestKind.PING, {KEY_INBOUND_STAMP: self._clock_ms()}, self._on_pong)

    def _on_pong(self, is_error: bool, frame: dict[str, Any]) -> None:
        result = PingResult(lost=True) if is_error else PingResult(lost=False, latency_ms=_latency_ms(frame))
        self.last_ping = result
        logger.info("ping lost=%s time=%s", result.lost, result.latency_ms)

    async def setup(self) -> bool:
        return await self.channel.send(RequestKind.SETUP, None, self._on_setup)

    def _on_setup(self, is_error: bool, frame: dict[str, Any]) -> None:
        if not is_error:
            self.setup_result = frame
            logger.info("setup result=%s", frame.get(KEY_RESULT))
            return
        if not self.channel.is_open:
            return
        if self._setup_retry is None or self._setup_retry.done():
            self._setup_retry = asyncio.create_task(self._retry_setup())

    async def _retry_setup(self) -> None:
        await asyncio.sleep(self._settings.channel.setup_retry_delay_s)
        if self.channel.is_open:
            await self.setup()

    async def _cancel_setup_retry(self) -> None:
        task = self._setup_retry
        self._setup_retry = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def version(self) -> str:
        frame = await self.channel.request(RequestKind.VERSION)
        return str(frame.get("version", ""))

    async def appdrive(self, *, rescan: bool = False) -> dict[str, Any]:
        frame = await self.channel.request(RequestKind.APPDRIVE, {"rescan": rescan})
        appdrive = frame.get("appdrive")
        return appdrive if isinstance(appdrive, dict) else {}


__all__ = ["FrontendClient", "PingResult"]
