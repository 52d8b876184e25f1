"""Presence — in-process presence channels and the per-session online-count aggregator.

Invariants:
    - A channel keeps key → list of metas; every change broadcasts the FULL snapshot
    - A session tracks its own payload only after its subscription is confirmed
    - The aggregator's count always comes from the latest snapshot (count_present)
    - leave() removes the key and broadcasts, so remaining members converge
    - A failing sync callback (e.g. a closed websocket) never blocks other members

Design Decisions:
    - Hub is per process: single uvicorn worker, presence is ephemeral by nature
    - Snapshots are copied before delivery; members cannot mutate shared state
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from uuid import uuid4

from kontekst.core.domain_types import ONLINE_CHANNEL, PresenceStatus
from kontekst.core.presence import count_present, presence_payload
from kontekst.core.repository_protocols import PresenceChannel, PresenceSnapshot

logger = logging.getLogger(__name__)

StatusCallback = Callable[[PresenceStatus], Awaitable[None]]
SyncCallback = Callable[[PresenceSnapshot], Awaitable[None]]


class _ChannelState:
    def __init__(self, name: str):
        self.name = name
        self.members: dict[str, list[dict]] = {}
        self.listeners: dict[str, SyncCallback] = {}

    def snapshot(self) -> PresenceSnapshot:
        return {key: [dict(m) for m in metas] for key, metas in self.members.items()}

    async def broadcast(self) -> None:
        for key, callback in list(self.listeners.items()):
            try:
                await callback(self.snapshot())
            except Exception as e:
                logger.warning(f"Presence sync delivery failed for {key}: {e}")


class HubPresenceChannel:
    """One session's membership in a hub channel (PresenceChannel implementation)."""

    def __init__(self, state: _ChannelState, key: str):
        self._state = state
        self.key = key
        self._on_sync: SyncCallback | None = None
        self._joined = False

    async def subscribe(self, on_status: StatusCallback) -> None:
        if self._on_sync is not None:
            self._state.listeners[self.key] = self._on_sync
        self._joined = True
        await on_status(PresenceStatus.SUBSCRIBED)

    def on_sync(self, callback: SyncCallback) -> None:
        self._on_sync = callback
        if self._joined:
            self._state.listeners[self.key] = callback

    async def track(self, payload: dict) -> None:
        if not self._joined:
            return
        self._state.members[self.key] = [dict(payload)]
        await self._state.broadcast()

    def presence_state(self) -> PresenceSnapshot:
        return self._state.snapshot()

    async def leave(self) -> None:
        self._joined = False
        self._state.listeners.pop(self.key, None)
        if self._state.members.pop(self.key, None) is not None:
            await self._state.broadcast()


class PresenceHub:
    """Named presence channels shared by every connection in this process."""

    def __init__(self):
        self._channels: dict[str, _ChannelState] = {}

    def _state(self, name: str) -> _ChannelState:
        if name not in self._channels:
            self._channels[name] = _ChannelState(name)
        return self._channels[name]

    def join(self, key: str, channel: str = ONLINE_CHANNEL) -> HubPresenceChannel:
        return HubPresenceChannel(self._state(channel), key)

    def online_count(self, channel: str = ONLINE_CHANNEL) -> int:
        state = self._channels.get(channel)
        return count_present(state.members) if state else 0


class PresenceAggregator:
    """Joins a channel under a fresh session key and tracks the online count."""

    def __init__(
        self,
        channel_factory: Callable[[str], PresenceChannel],
        client_meta: str = "",
        on_count: Callable[[int], Awaitable[None]] | None = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.channel_factory = channel_factory
        self.client_meta = client_meta
        self.on_count = on_count
        self._now = now
        self.count = 0
        self.key: str | None = None
        self._channel: PresenceChannel | None = None

    async def activate(self) -> None:
        self.key = str(uuid4())
        self._channel = self.channel_factory(self.key)
        self._channel.on_sync(self._handle_sync)
        await self._channel.subscribe(self._handle_status)

    async def deactivate(self) -> None:
        if self._channel is not None:
            await self._channel.leave()
            self._channel = None

    async def _handle_status(self, status: PresenceStatus) -> None:
        if status == PresenceStatus.SUBSCRIBED and self._channel is not None:
            await self._channel.track(presence_payload(self._now(), self.client_meta))

    async def _handle_sync(self, snapshot: PresenceSnapshot) -> None:
        self.count = count_present(snapshot)
        if self.on_count is not None:
            await self.on_count(self.count)
