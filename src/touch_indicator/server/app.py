from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from touch_indicator.config import get_settings
from touch_indicator.protocol.constants import RELAY_PATH

from .peers import PEERS, PeerSet, broadcast

logger = logging.getLogger(__name__)


def create_app(peers: PeerSet | None = None) -> FastAPI:
    """Build the relay app; each app instance fans out over its own peer set."""
    peers = peers if peers is not None else PeerSet()
    app = FastAPI()
    app.state.peers = peers

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "Touch Indicator WebSocket Server"

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "clients": len(peers)}

    @app.websocket(RELAY_PATH)
    async def relay(ws: WebSocket):
        await ws.accept()
        peers.add(ws)
        try:
            while True:
                event = await ws.receive()
                if event["type"] == "websocket.disconnect":
                    break
                data = event.get("text")
                if data is None and event.get("bytes") is not None:
                    data = event["bytes"].decode("utf-8", errors="replace")
                if data is None:
                    continue
                if get_settings().debug_log_msgs:
                    logger.info("Received: %s from=%s", data, getattr(ws.client, "host", None))
                await broadcast(peers, data, exclude=ws)
        except WebSocketDisconnect:
            pass
        finally:
            peers.discard(ws)

    return app


app = create_app(PEERS)
