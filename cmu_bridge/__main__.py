"""Command-line entry points: backend service, frontend client, one-off discovery."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
import contextlib

import orjson
import uvicorn

from cmu_bridge.server import create_app
from cmu_bridge.frontend import DocumentHost, FrontendClient
from cmu_bridge.runtime.logging import configure_logging
from cmu_bridge.runtime.settings_loader import load_settings
from cmu_bridge.appdrive import AppDriveScanner, AppDriveRegistry

logger = logging.getLogger(__name__)


def _serve(_args: argparse.Namespace) -> int:
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.network.host,
        port=settings.network.port,
        log_config=None,
    )
    return 0


async def _run_frontend(duration_s: float | None) -> int:
    host = DocumentHost()
    client = FrontendClient(load_settings(), host)
    client.start()
    try:
        if duration_s is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration_s)
    finally:
        await client.shutdown()
    logger.info("frontend: %s element(s) injected", len(host.elements))
    return 0


def _frontend(args: argparse.Namespace) -> int:
    with contextlib.suppress(KeyboardInterrupt):
        return asyncio.run(_run_frontend(args.duration))
    return 0


def _scan(_args: argparse.Namespace) -> int:
    registry = AppDriveRegistry(AppDriveScanner(load_settings().appdrive))
    appdrive = registry.refresh()
    sys.stdout.write(orjson.dumps(appdrive.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
    return 0 if appdrive.enabled else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="cmu-bridge", description="Head-unit appdrive bridge")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the backend service")

    frontend = sub.add_parser("frontend", help="Run a frontend client with an in-memory document")
    frontend.add_argument("--duration", type=float, default=None, help="Seconds to stay connected (default: forever)")

    sub.add_parser("scan", help="Run one discovery pass and print the registry as JSON")

    args = parser.parse_args(argv)
    configure_logging()

    handlers = {"serve": _serve, "frontend": _frontend, "scan": _scan}
    return handlers[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
