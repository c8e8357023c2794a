from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

import websockets

from touch_indicator.log import logging_setup
from touch_indicator.protocol.messages import GestureMessage, decode

logger = logging.getLogger(__name__)


def load_events(jsonl_path: Path) -> list[tuple[int | None, GestureMessage]]:
    """
    Read recorded gestures.

    Accepted line formats:
      - record_jsonl.py output: {"ts": <ms>, "msg": {...}}
      - or raw messages per line: {...}
    Lines that do not hold a valid gesture message are skipped.
    """
    events: list[tuple[int | None, GestureMessage]] = []
    for lineno, line in enumerate(jsonl_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("%s:%d: not JSON, skipped", jsonl_path, lineno)
            continue

        ts: int | None = None
        raw = obj
        if isinstance(obj, dict) and isinstance(obj.get("msg"), dict):
            t = obj.get("ts")
            ts = int(t) if isinstance(t, (int, float)) else None
            raw = obj["msg"]

        msg = decode(json.dumps(raw))
        if msg is None:
            logger.warning("%s:%d: not a gesture message, skipped", jsonl_path, lineno)
            continue
        events.append((ts, msg))
    return events


async def replay(
    ws_url: str,
    jsonl_path: Path,
    *,
    speed: float = 1.0,
    default_dt_ms: int = 0,
    only_phase: str | None = None,
) -> int:
    """Replay recorded gestures into the relay, keeping their original spacing."""
    events = load_events(jsonl_path)
    sent = 0

    async with websockets.connect(ws_url, max_size=2**20) as ws:
        prev_ts: int | None = None
        for ts, msg in events:
            if only_phase and msg.phase != only_phase:
                continue

            if ts is not None and prev_ts is not None:
                dt_ms = max(0, ts - prev_ts)
            else:
                dt_ms = default_dt_ms

            prev_ts = ts if ts is not None else prev_ts
            if dt_ms:
                await asyncio.sleep((dt_ms / 1000.0) / max(0.01, speed))

            await ws.send(msg.to_wire())
            sent += 1
    return sent


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay gesture JSONL into the relay websocket.")
    ap.add_argument("--ws", required=True, help="WebSocket URL, e.g. ws://127.0.0.1:8080/ws")
    ap.add_argument("--in", dest="inp", required=True, help="Input JSONL path")
    ap.add_argument("--speed", type=float, default=1.0, help="Speed multiplier (2.0 = 2x faster)")
    ap.add_argument("--default-dt-ms", type=int, default=0, help="Delay between messages if no timestamps")
    ap.add_argument(
        "--only-phase",
        choices=("start", "move", "tap"),
        default=None,
        help="If set, only replay messages of this phase.",
    )
    args = ap.parse_args()

    logging_setup("INFO")
    sent = asyncio.run(
        replay(
            args.ws,
            Path(args.inp),
            speed=args.speed,
            default_dt_ms=args.default_dt_ms,
            only_phase=args.only_phase,
        )
    )
    logger.info("Replayed %d messages", sent)


if __name__ == "__main__":
    main()
