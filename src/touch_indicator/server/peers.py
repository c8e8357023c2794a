from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import WebSocket

logger = logging.getLogger(__name__)


@dataclass
class PeerSet:
    """
    Currently open relay connections.

    Mutated only from the event loop; add/discard never await, so membership
    changes cannot interleave with a fan-out snapshot.
    """

    clients: set[WebSocket] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self.clients)

    def add(self, ws: WebSocket) -> None:
        self.clients.add(ws)
        logger.info("Client connected. Total clients: %d", len(self.clients))

    def discard(self, ws: WebSocket) -> None:
        if ws in self.clients:
            self.clients.discard(ws)
            logger.info("Client disconnected. Total clients: %d", len(self.clients))


PEERS = PeerSet()


async def broadcast(peers: PeerSet, data: str, exclude: WebSocket | None = None) -> int:
    """Forward raw text to every peer except `exclude`; returns the delivery count."""
    dead: list[WebSocket] = []
    sent = 0
    for ws in list(peers.clients):
        if exclude is ws:
            continue
        try:
            await ws.send_text(data)
            sent += 1
        except Exception as e:
            logger.debug("Dropping peer after failed send: %s", e)
            dead.append(ws)
    for ws in dead:
        peers.discard(ws)
    return sent
