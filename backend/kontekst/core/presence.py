"""Presence counting — derives the online count from a full membership snapshot.

Invariants:
    - count == number of distinct session keys in the latest snapshot
    - A key with an empty meta list is not present
    - Previous snapshots never influence the count (no incremental +1/-1)
"""

from collections.abc import Mapping, Sequence
from datetime import datetime


def count_present(snapshot: Mapping[str, Sequence[dict]]) -> int:
    return sum(1 for metas in snapshot.values() if metas)


def presence_payload(online_at: datetime, client_meta: str) -> dict:
    """Payload a session announces about itself once subscribed."""
    return {"online_at": online_at.isoformat(), "client_meta": client_meta}
