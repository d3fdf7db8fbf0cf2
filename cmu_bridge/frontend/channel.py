"""Frontend half of the RPC channel: one persistent socket, correlated replies, pushes.

State machine: ``disconnected -> connecting -> open -> (closing | disconnected)``.
The connect loop reconnects after a fixed delay unless the backend closed with
the final close code or ``shutdown()`` was called. Every way a connection ends
fails the requests still pending on it.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

import websockets
from websockets.exceptions import ConnectionClosed

from cmu_bridge.errors import RequestError
from cmu_bridge.state.settings import ChannelSettings
from cmu_bridge.config.network import WS_MAX_MESSAGE_BYTES
from cmu_bridge.state.connection import ReplyCallback, PendingRequest, ConnectionState
from cmu_bridge.config.protocol import (
    KEY_RESULT,
    RESULT_ERROR,
    KEY_REQUEST_ID,
    CLOSE_FINAL_CODE,
    CLOSE_FINAL_REASON,
)
from cmu_bridge.protocol import (
    Command,
    PushFrame,
    RequestKind,
    encode_frame,
    build_request,
    parse_backend_frame,
)

from .ids import ClockMs, CorrelationIds

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Any]
OpenHook = Callable[[], Awaitable[None]]
CommandSink = Callable[[Command], Any]


def get_ws_options(settings: ChannelSettings) -> dict[str, Any]:
    return {
        "open_timeout": settings.connect_timeout_s,
        "max_size": WS_MAX_MESSAGE_BYTES,
        # Liveness is measured with application-level ping requests.
        "ping_interval": None,
        "ping_timeout": None,
    }


def _request_name(request: str | RequestKind) -> str:
    return request.value if isinstance(request, RequestKind) else str(request)


def _close_code(source: Any) -> int | None:
    if isinstance(source, ConnectionClosed):
        rcvd = getattr(source, "rcvd", None)
        return getattr(rcvd, "code", None)
    return getattr(source, "close_code", None)


class RpcChannel:
    def __init__(
        self,
        url: str,
        settings: ChannelSettings,
        *,
        on_open: OpenHook | None = None,
        on_command: CommandSink | None = None,
        connect_fn: ConnectFn | None = None,
        clock_ms: ClockMs | None = None,
    ) -> None:
        self._url = url
        self._settings = settings
        self._on_open = on_open
        self._on_command = on_command
        self._connect_fn = connect_fn or websockets.connect
        self._ids = CorrelationIds(clock_ms)

        self._state = ConnectionState.DISCONNECTED
        self._ws: Any | None = None
        self._pending: dict[int, PendingRequest] = {}
        self._task: asyncio.Task | None = None
        self._hook_task: asyncio.Task | None = None
        self._open_event = asyncio.Event()
        self._stopping = False

        self.last_error: str | None = None
        self.last_close_code: int | None = None
        self.connect_attempts = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN and self._ws is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        logger.debug("channel: %s -> %s", self._state.value, state.value)
        self._state = state
        if state is ConnectionState.OPEN:
            self._open_event.set()
        else:
            self._open_event.clear()

    async def wait_open(self, timeout_s: float | None = None) -> bool:
        try:
            await asyncio.wait_for(self._open_event.wait(), timeout=timeout_s)
        except TimeoutError:
            return False
        return True

    # ------------------------------------------------------------------ lifecycle

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._stopping = False
            self._task = asyncio.create_task(self._run())
        return self._task

    async def shutdown(self) -> None:
        """Close with the final code and suppress any further reconnect."""
        self._stopping = True
        ws = self._ws
        if ws is not None:
            self._set_state(ConnectionState.CLOSING)
            with contextlib.suppress(Exception):
                await ws.close(code=CLOSE_FINAL_CODE, reason=CLOSE_FINAL_REASON)

        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        await self._cancel_hook()
        self._ws = None
        self._fail_all_pending("shutdown")
        self._set_state(ConnectionState.DISCONNECTED)

    async def _run(self) -> None:
        while not self._stopping:
            await self._connect_once()
            if self._stopping:
                break
            if self.last_close_code == CLOSE_FINAL_CODE:
                logger.info("channel: closed with final code %s; not reconnecting", CLOSE_FINAL_CODE)
                break
            logger.info("channel: reconnecting in %.1fs", self._settings.retry_delay_s)
            await asyncio.sleep(self._settings.retry_delay_s)

    async def _connect_once(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        self.connect_attempts += 1
        self.last_close_code = None
        try:
            async with self._connect_fn(self._url, **get_ws_options(self._settings)) as ws:
                self._ws = ws
                self.last_error = None
                self._set_state(ConnectionState.OPEN)
                logger.info("channel: connection open %s", self._url)
                self._start_hook()
                async for raw in ws:
                    self.on_message(raw)
                self.last_close_code = _close_code(ws)
        except ConnectionClosed as exc:
            self.last_close_code = _close_code(exc)
            self.last_error = str(exc)
            logger.warning("channel: connection dropped: %s", exc)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            logger.warning("channel: connection failed: %s", self.last_error)
        finally:
            self._ws = None
            if self._state is not ConnectionState.CLOSING:
                self._set_state(ConnectionState.DISCONNECTED)
            self._fail_all_pending("connection closed")
            await self._cancel_hook()

    def _start_hook(self) -> None:
        if self._on_open is None:
            return
        # The hook issues requests; it must not block the receive loop that delivers their replies.
        self._hook_task = asyncio.create_task(self._run_hook(self._on_open))

    @staticmethod
    async def _run_hook(hook: OpenHook) -> None:
        try:
            await hook()
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception("channel: open hook failed")

    async def _cancel_hook(self) -> None:
        task = self._hook_task
        self._hook_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # ------------------------------------------------------------------ requests

    async def send(
        self,
        request: str | RequestKind,
        payload: dict[str, Any] | None = None,
        callback: ReplyCallback | None = None,
        *,
        timeout_s: float | None = None,
    ) -> bool:
        """Transmit a request; never queues.

        While the connection is not open the callback fails immediately with
        ``(True, {})`` and nothing is sent.
        """
        name = _request_name(request)
        ws = self._ws
        if not self.is_open or ws is None:
            logger.debug("channel: '%s' dropped; connection is %s", name, self._state.value)
            self._invoke(callback, True, {}, name)
            return False

        request_id = self._ids.next(self._pending)
        pending = PendingRequest(request_id=request_id, request=name, callback=callback)
        timeout = self._settings.request_timeout_s if timeout_s is None else timeout_s
        if timeout > 0:
            pending.timeout_handle = asyncio.get_running_loop().call_later(timeout, self._expire, request_id)
        self._pending[request_id] = pending

        try:
            await ws.send(encode_frame(build_request(name, request_id, payload)))
        except Exception as exc:
            logger.warning("channel: sending '%s' failed: %s", name, exc)
            self._fail(request_id)
            return False
        return True

    async def request(
        self,
        request: str | RequestKind,
        payload: dict[str, Any] | None = None,
        *,
        timeout_s: float | None = None,
    ) -> dict[str, Any]:
        """Awaitable form of ``send``; raises ``RequestError`` instead of flagging."""
        name = _request_name(request)
        future: asyncio.Future[tuple[bool, dict[str, Any]]] = asyncio.get_running_loop().create_future()

        def _done(is_error: bool, frame: dict[str, Any]) -> None:
            if not future.done():
                future.set_result((is_error, frame))

        sent = await self.send(name, payload, _done, timeout_s=timeout_s)
        is_error, frame = await future
        if not is_error:
            return frame

        if not sent:
            reason = "not connected"
        elif frame:
            reason = f"error reply ({frame.get(KEY_RESULT)})"
        else:
            reason = "no reply"
        raise RequestError(request=name, request_id=frame.get(KEY_REQUEST_ID), reason=reason)

    def _expire(self, request_id: int) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None:
            return
        pending.timeout_handle = None
        logger.warning("channel: '%s' (requestId=%s) timed out", pending.request, request_id)
        self._invoke(pending.callback, True, {}, pending.request)

    def _fail(self, request_id: int) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None:
            return
        pending.cancel_timeout()
        self._invoke(pending.callback, True, {}, pending.request)

    def _fail_all_pending(self, reason: str) -> None:
        if not self._pending:
            return
        pending = list(self._pending.values())
        self._pending.clear()
        logger.info("channel: failing %s pending request(s): %s", len(pending), reason)
        for entry in pending:
            entry.cancel_timeout()
            self._invoke(entry.callback, True, {}, entry.request)

    @staticmethod
    def _invoke(callback: ReplyCallback | None, is_error: bool, frame: dict[str, Any], name: str) -> None:
        if callback is None:
            return
        try:
            callback(is_error, frame)
        except Exception:
            logger.exception("channel: callback for '%s' failed", name)

    # ------------------------------------------------------------------ inbound

    def on_message(self, raw: str | bytes) -> None:
        try:
            frame = parse_backend_frame(raw)
        except ValueError as exc:
            logger.warning("channel: dropping malformed frame: %s", exc)
            return

        if isinstance(frame, PushFrame):
            self._dispatch_push(frame)
            return

        pending = self._pending.pop(frame.request_id, None)
        if pending is None:
            logger.debug("channel: ignoring reply for unknown requestId=%s", frame.request_id)
            return
        pending.cancel_timeout()
        self._invoke(pending.callback, frame.result == RESULT_ERROR, frame.payload, pending.request)

    def _dispatch_push(self, frame: PushFrame) -> None:
        if frame.command is None:
            logger.warning("channel: ignoring unknown command '%s'", frame.name)
            return
        if self._on_command is None:
            logger.debug("channel: no command handler; dropping '%s'", frame.name)
            return
        try:
            self._on_command(frame.command)
        except Exception:
            logger.exception("channel: command '%s' failed", frame.name)


__all__ = ["ConnectFn", "RpcChannel", "get_ws_options"]
