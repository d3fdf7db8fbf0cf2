from __future__ import annotations

import time
from pathlib import Path

import pytest

from cmu_bridge import __version__
from cmu_bridge.frontend import DocumentHost, CommandHandler
from cmu_bridge.state import RuntimeDeps
from cmu_bridge.state.settings import AppSettings, NetworkSettings, ChannelSettings, AppDriveSettings
from cmu_bridge.protocol import PushFrame, ReplyFrame, CommandKind, encode_frame, parse_backend_frame
from cmu_bridge.handlers.connections import ClientSlot
from cmu_bridge.runtime.dependencies import build_runtime_deps
from cmu_bridge.handlers.websocket.replies import send_command
from cmu_bridge.handlers.websocket.message_loop import handle_frame
from cmu_bridge.appdrive import build_load_command
from tests.utils.fakes import FakeClientSocket


def _settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        network=NetworkSettings(host="127.0.0.1", port=9700, ws_path="/"),
        channel=ChannelSettings(
            retry_delay_s=5.0,
            connect_timeout_s=10.0,
            request_timeout_s=30.0,
            setup_retry_delay_s=0.1,
        ),
        appdrive=AppDriveSettings(
            mount_root=tmp_path / "mnt",
            mount_points=("sd_nav", "sda", "sdb"),
            runtime_mount_path=tmp_path / "persist" / "custom",
        ),
    )


def _make_clock_volume(tmp_path: Path) -> Path:
    root = tmp_path / "mnt" / "sdb" / "appdrive"
    (root / "system" / "framework").mkdir(parents=True)
    (root / "system" / "custom").mkdir()
    (root / "system" / "framework" / "framework.js").write_text("framework()")
    (root / "system" / "framework" / "framework.css").write_text("body{}")
    (root / "apps" / "com.example.clock").mkdir(parents=True)
    (root / "apps" / "com.example.clock" / "app.js").write_text("clock()")
    (root / "appdrive.json").write_text('{"name": "drive"}')
    return root


def _attached(deps: RuntimeDeps) -> FakeClientSocket:
    ws = FakeClientSocket()
    deps.client_slot.attach(ws)
    return ws


def _request(name: str, request_id: int = 7, **fields) -> str:
    return encode_frame({"request": name, "requestId": request_id, **fields})


@pytest.mark.asyncio
async def test_version_reply(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("version", 3))

    assert ws.sent == [{"request": "version", "requestId": 3, "version": __version__, "result": 200}]


@pytest.mark.asyncio
async def test_ping_reply_carries_outbound_stamp(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)
    before = int(time.time() * 1000)

    await handle_frame(ws, deps, _request("ping", 4, inboundStamp=before))

    reply = ws.sent[0]
    assert reply["result"] == 201
    assert reply["requestId"] == 4
    assert reply["inboundStamp"] == before
    assert reply["outboundStamp"] >= before


@pytest.mark.asyncio
async def test_unknown_request_is_not_found(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("reboot", 5))

    assert ws.sent == [{"request": "reboot", "requestId": 5, "result": 404}]


@pytest.mark.asyncio
async def test_reply_never_echoes_a_command_field(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("version", 15, command="loadcss"))

    assert ws.sent == [{"request": "version", "requestId": 15, "version": __version__, "result": 200}]
    assert isinstance(parse_backend_frame(encode_frame(ws.sent[0])), ReplyFrame)


@pytest.mark.asyncio
async def test_malformed_frame_gets_no_reply(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, "{broken")
    await handle_frame(ws, deps, '{"request": "ping"}')

    assert ws.sent == []


@pytest.mark.asyncio
async def test_handler_failure_replies_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    def _boom() -> None:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(deps.registry, "refresh", _boom)
    await handle_frame(ws, deps, _request("appdrive", 6, rescan=True))

    assert ws.sent == [{"request": "appdrive", "requestId": 6, "rescan": True, "result": 500}]


@pytest.mark.asyncio
async def test_setup_without_appdrive_is_not_found(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("setup", 8))

    assert ws.sent == [{"request": "setup", "requestId": 8, "enabled": False, "result": 404}]


@pytest.mark.asyncio
async def test_setup_replies_then_pushes_framework(tmp_path: Path) -> None:
    root = _make_clock_volume(tmp_path)
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("setup", 9))

    reply, loadjs, loadcss = ws.sent
    assert reply["result"] == 200
    assert reply["requestId"] == 9
    framework = root / "system" / "framework"
    assert loadjs == {
        "command": "loadjs",
        "attributes": {"data": [{"location": str(framework / "framework.js"), "contents": "framework()"}]},
    }
    assert loadcss["command"] == "loadcss"
    assert loadcss["attributes"]["data"][0]["contents"] == "body{}"


@pytest.mark.asyncio
async def test_setup_pushes_to_the_current_client(tmp_path: Path) -> None:
    _make_clock_volume(tmp_path)
    deps = build_runtime_deps(_settings(tmp_path))
    old = _attached(deps)
    new = _attached(deps)

    await handle_frame(old, deps, _request("setup", 10))

    assert [frame.get("result") for frame in old.sent] == [200]
    assert [frame["command"] for frame in new.sent] == ["loadjs", "loadcss"]


@pytest.mark.asyncio
async def test_appdrive_rescan_reports_new_bundles(tmp_path: Path) -> None:
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    await handle_frame(ws, deps, _request("appdrive", 11))
    assert ws.sent[-1]["result"] == 404
    assert ws.sent[-1]["appdrive"]["enabled"] is False

    _make_clock_volume(tmp_path)
    await handle_frame(ws, deps, _request("appdrive", 12))
    assert ws.sent[-1]["result"] == 404

    await handle_frame(ws, deps, _request("appdrive", 13, rescan=True))
    reply = ws.sent[-1]
    assert reply["result"] == 200
    assert reply["appdrive"]["volumes"] == ["sdb"]
    assert list(reply["appdrive"]["applications"]) == ["com.example.clock"]


@pytest.mark.asyncio
async def test_clock_bundle_round_trip(tmp_path: Path) -> None:
    _make_clock_volume(tmp_path)
    deps = build_runtime_deps(_settings(tmp_path))
    ws = _attached(deps)

    appdrive = deps.registry.current
    assert list(appdrive.applications) == ["com.example.clock"]
    bundle = appdrive.applications["com.example.clock"]
    assert set(bundle.files) == {"app.js"}

    await handle_frame(ws, deps, _request("setup", 14))
    assert ws.sent[0]["result"] == 200

    host = DocumentHost()
    handler = CommandHandler(host)
    push = build_load_command(CommandKind.LOAD_JS, [bundle.files["app.js"]])
    for _ in range(2):
        ws.sent.clear()
        await send_command(deps.client_slot.current, push)
        frame = parse_backend_frame(encode_frame(ws.sent[0]))
        assert isinstance(frame, PushFrame)
        assert frame.command is not None
        handler.apply(frame.command)
        assert len(host.elements) == 1

    element = host.elements[0]
    assert element.location == str(bundle.files["app.js"])
    assert element.contents == "clock()"


@pytest.mark.asyncio
async def test_push_without_client_is_dropped() -> None:
    push = build_load_command(CommandKind.LOAD_CSS, [])
    assert await send_command(None, push) is False


@pytest.mark.asyncio
async def test_client_slot_keeps_latest_and_releases() -> None:
    slot = ClientSlot()
    first, second = FakeClientSocket(), FakeClientSocket()

    assert slot.attach(first) is None
    assert slot.attach(second) is first
    assert slot.generation == 2
    assert slot.detach(first) is False
    assert slot.current is second
    assert first.closed_with is None

    await slot.release_all()
    assert slot.current is None
    assert second.closed_with == 1001
