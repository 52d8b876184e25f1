"""Presence Routes — websocket membership and the current online count.

Invariants:
    - Each websocket connection runs exactly one PresenceAggregator
    - The aggregator leaves the channel when the socket closes, however it closes
    - Every sync pushes {"type": "presence", "count": n} to the client
"""

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from kontekst.api.dependencies import presence_hub
from kontekst.core.domain_types import ONLINE_CHANNEL
from kontekst.services.presence import PresenceAggregator, PresenceHub

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/presence", tags=["presence"])


@router.get("/online")
async def online_count(hub: PresenceHub = Depends(presence_hub)):
    return {"channel": ONLINE_CHANNEL, "count": hub.online_count()}


@router.websocket("/ws")
async def presence_socket(websocket: WebSocket):
    hub: PresenceHub = websocket.app.state.presence_hub
    await websocket.accept()

    async def push(count: int) -> None:
        await websocket.send_json({"type": "presence", "count": count})

    aggregator = PresenceAggregator(
        channel_factory=lambda key: hub.join(key),
        client_meta=websocket.headers.get("user-agent", ""),
        on_count=push,
    )
    await aggregator.activate()
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await aggregator.deactivate()
