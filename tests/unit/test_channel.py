from __future__ import annotations

import asyncio
from typing import Any

import pytest

from cmu_bridge.errors import RequestError
from cmu_bridge.frontend import RpcChannel
from cmu_bridge.state.settings import ChannelSettings
from cmu_bridge.state.connection import ConnectionState
from cmu_bridge.protocol import Command, CommandKind, encode_frame
from tests.utils.fakes import FakeConnector

URL = "ws://127.0.0.1:9700/"


def _settings(*, request_timeout_s: float = 30.0) -> ChannelSettings:
    return ChannelSettings(
        retry_delay_s=0.01,
        connect_timeout_s=1.0,
        request_timeout_s=request_timeout_s,
        setup_retry_delay_s=0.01,
    )


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[bool, dict[str, Any]]] = []
        self.done = asyncio.Event()

    def __call__(self, is_error: bool, frame: dict[str, Any]) -> None:
        self.calls.append((is_error, frame))
        self.done.set()

    async def wait(self, timeout: float = 1.0) -> tuple[bool, dict[str, Any]]:
        await asyncio.wait_for(self.done.wait(), timeout=timeout)
        return self.calls[0]


async def _open_channel(connector: FakeConnector, **kwargs: Any) -> tuple[RpcChannel, Any]:
    channel = RpcChannel(URL, kwargs.pop("settings", _settings()), connect_fn=connector, **kwargs)
    channel.start()
    ws = await connector.next_socket()
    assert await channel.wait_open(1.0)
    return channel, ws


@pytest.mark.asyncio
async def test_reply_resolves_matching_request_and_clears_pending() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    recorder = _Recorder()
    assert await channel.send("ping", {"inboundStamp": 1}, recorder)
    sent = ws.sent[-1]
    assert sent["request"] == "ping"
    assert channel.pending_count == 1

    ws.deliver({**sent, "result": 201, "outboundStamp": 2})
    is_error, frame = await recorder.wait()

    assert is_error is False
    assert frame["result"] == 201
    assert frame["outboundStamp"] == 2
    assert channel.pending_count == 0
    await channel.shutdown()


@pytest.mark.asyncio
async def test_error_reply_is_flagged() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    recorder = _Recorder()
    await channel.send("setup", None, recorder)
    ws.deliver({**ws.sent[-1], "result": 500})
    is_error, frame = await recorder.wait()

    assert is_error is True
    assert frame["result"] == 500
    await channel.shutdown()


@pytest.mark.asyncio
async def test_reply_for_unknown_id_is_ignored() -> None:
    connector = FakeConnector()
    channel, _ws = await _open_channel(connector)

    recorder = _Recorder()
    await channel.send("ping", None, recorder)
    channel.on_message('{"request": "ping", "requestId": 1, "result": 201}')

    assert recorder.calls == []
    assert channel.pending_count == 1
    await channel.shutdown()


@pytest.mark.asyncio
async def test_ids_unique_within_the_same_millisecond() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector, clock_ms=lambda: 1000)

    for _ in range(3):
        await channel.send("ping")

    ids = [frame["requestId"] for frame in ws.sent]
    assert ids == [1000, 1001, 1002]
    assert channel.pending_count == 3
    await channel.shutdown()


@pytest.mark.asyncio
async def test_teardown_fails_every_pending_request_once() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    recorders = [_Recorder() for _ in range(3)]
    for recorder in recorders:
        await channel.send("appdrive", None, recorder)
    assert channel.pending_count == 3

    ws.drop(1006)
    for recorder in recorders:
        assert await recorder.wait() == (True, {})

    assert channel.pending_count == 0
    assert all(len(recorder.calls) == 1 for recorder in recorders)
    await channel.shutdown()


@pytest.mark.asyncio
async def test_request_times_out_and_late_reply_is_ignored() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector, settings=_settings(request_timeout_s=0.02))

    recorder = _Recorder()
    await channel.send("version", None, recorder)
    sent = ws.sent[-1]

    assert await recorder.wait() == (True, {})
    assert channel.pending_count == 0

    channel.on_message(encode_frame({**sent, "result": 200}))
    assert len(recorder.calls) == 1
    await channel.shutdown()


@pytest.mark.asyncio
async def test_send_while_disconnected_fails_immediately() -> None:
    channel = RpcChannel(URL, _settings(), connect_fn=FakeConnector())
    recorder = _Recorder()

    assert await channel.send("ping", None, recorder) is False
    assert recorder.calls == [(True, {})]
    assert channel.pending_count == 0
    assert channel.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_shutdown_closes_with_final_code_and_never_reconnects() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)
    recorder = _Recorder()
    await channel.send("ping", None, recorder)

    await channel.shutdown()

    assert ws.close_code == 3110
    assert recorder.calls == [(True, {})]
    assert channel.state is ConnectionState.DISCONNECTED
    await asyncio.sleep(0.05)
    assert len(connector.sockets) == 1


@pytest.mark.asyncio
async def test_backend_final_close_suppresses_reconnect() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    ws.drop(3110)
    await asyncio.sleep(0.05)

    assert channel.last_close_code == 3110
    assert channel.state is ConnectionState.DISCONNECTED
    assert len(connector.sockets) == 1
    await channel.shutdown()


@pytest.mark.asyncio
async def test_dropped_connection_reconnects_after_delay() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    ws.drop(1006)
    second = await connector.next_socket()

    assert second is not ws
    assert await channel.wait_open(1.0)
    assert channel.connect_attempts == 2
    await channel.shutdown()


@pytest.mark.asyncio
async def test_failed_connect_is_retried() -> None:
    connector = FakeConnector(failures=2)
    channel = RpcChannel(URL, _settings(), connect_fn=connector)
    channel.start()

    await connector.next_socket()
    assert await channel.wait_open(1.0)
    assert channel.connect_attempts == 3
    assert connector.options["ping_interval"] is None
    await channel.shutdown()


@pytest.mark.asyncio
async def test_malformed_frame_is_dropped_and_channel_keeps_working() -> None:
    connector = FakeConnector()
    channel, ws = await _open_channel(connector)

    recorder = _Recorder()
    await channel.send("ping", None, recorder)
    ws.deliver("{not json")
    ws.deliver({**ws.sent[-1], "result": 201})

    is_error, _frame = await recorder.wait()
    assert is_error is False
    assert channel.is_open
    await channel.shutdown()


@pytest.mark.asyncio
async def test_push_commands_reach_the_sink() -> None:
    received: list[Command] = []
    got = asyncio.Event()

    def _sink(command: Command) -> None:
        received.append(command)
        got.set()

    connector = FakeConnector()
    channel, ws = await _open_channel(connector, on_command=_sink)

    ws.deliver({"command": "reboot", "attributes": {}})
    ws.deliver({"command": "loadjs", "attributes": {"data": [{"location": "/a.js", "contents": "1"}]}})
    await asyncio.wait_for(got.wait(), timeout=1.0)

    assert [command.kind for command in received] == [CommandKind.LOAD_JS]
    await channel.shutdown()


@pytest.mark.asyncio
async def test_request_helper_raises_on_error_reply() -> None:
    def _responder(frame: dict[str, Any]) -> list[dict[str, Any]]:
        if frame["request"] == "version":
            return [{**frame, "result": 200, "version": "9.9"}]
        return [{**frame, "result": 500}]

    connector = FakeConnector(_responder)
    channel, _ws = await _open_channel(connector)

    assert (await channel.request("version"))["version"] == "9.9"
    with pytest.raises(RequestError) as exc:
        await channel.request("setup")
    assert exc.value.reason == "error reply (500)"
    await channel.shutdown()


@pytest.mark.asyncio
async def test_request_helper_raises_when_not_connected() -> None:
    channel = RpcChannel(URL, _settings(), connect_fn=FakeConnector())
    with pytest.raises(RequestError) as exc:
        await channel.request("ping")
    assert exc.value.reason == "not connected"
