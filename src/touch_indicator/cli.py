"""
Command line entry point.

    touch-indicator relay   run the fan-out relay server
    touch-indicator watch   connect as a display and log marker updates
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from touch_indicator import __version__
from touch_indicator.config import get_settings
from touch_indicator.log import logging_setup

logger = logging.getLogger(__name__)


def relay_run(host: str, port: int, log_level: str) -> None:
    import uvicorn

    from touch_indicator.server.app import app

    logger.info("WebSocket server running at ws://%s:%d/ws", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


async def watch(url: str) -> None:
    from touch_indicator.client import ConnectionState, TouchDisplay

    def on_move(pos) -> None:
        logger.info("move -> (%.1f, %.1f)", pos.x, pos.y)

    def on_tap() -> None:
        logger.info("tap at (%.1f, %.1f)", display.tracker.position.x, display.tracker.position.y)

    display = TouchDisplay.from_settings(get_settings(), url=url, on_move=on_move, on_tap=on_tap)
    manager = display.manager
    manager.subscribe(lambda state, _msg: logger.debug("state=%s", state.value))
    manager.on_error = lambda exc: logger.warning("transport error: %s", exc)
    manager.connect()
    try:
        while manager.state is not ConnectionState.ERROR:
            await asyncio.sleep(0.25)
    finally:
        manager.disconnect()
        await manager.wait_closed()
    logger.error("Relay at %s unreachable; giving up", url)


def parser_build() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(prog="touch-indicator", description="Touch gesture relay.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level")
    ap.add_argument("--log-file", default=settings.log_file, help="Optional log file")
    sub = ap.add_subparsers(dest="command", required=True)

    relay = sub.add_parser("relay", help="Run the relay server")
    relay.add_argument("--host", default=settings.relay_host)
    relay.add_argument("--port", type=int, default=settings.relay_port)

    watch_p = sub.add_parser("watch", help="Connect as a display and log marker updates")
    watch_p.add_argument("--url", default=settings.relay_url, help="Relay WebSocket URL")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = parser_build().parse_args(argv)
    logging_setup(args.log_level, log_file=args.log_file)

    if args.command == "relay":
        relay_run(args.host, args.port, args.log_level)
    elif args.command == "watch":
        try:
            asyncio.run(watch(args.url))
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
