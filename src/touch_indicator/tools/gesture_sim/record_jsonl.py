from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from pathlib import Path

import websockets

from touch_indicator.log import logging_setup
from touch_indicator.protocol.messages import decode

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


async def record(ws_url: str, out_path: Path, *, echo: bool) -> None:
    """Append every valid gesture frame seen on the relay to a JSONL file."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:
        async with websockets.connect(ws_url, max_size=2**20) as ws:
            async for raw in ws:
                msg = decode(raw)
                if msg is None:
                    logger.warning("Skipping invalid frame: %r", raw)
                    continue
                if echo:
                    print(f"[record] {msg.phase} dx={msg.dx} dy={msg.dy}")
                f.write(json.dumps({"ts": _now_ms(), "msg": msg.model_dump()}) + "\n")
                f.flush()


def main() -> None:
    ap = argparse.ArgumentParser(description="Record relayed gestures to a JSONL file.")
    ap.add_argument("--ws", required=True, help="WebSocket URL, e.g. ws://127.0.0.1:8080/ws")
    ap.add_argument("--out", required=True, help="Output JSONL path")
    ap.add_argument("--print", action="store_true", help="Print received messages to stdout")
    args = ap.parse_args()

    logging_setup("INFO")
    asyncio.run(record(args.ws, Path(args.out), echo=args.print))


if __name__ == "__main__":
    main()
