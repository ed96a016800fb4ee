"""In-process conversation state store with TTL eviction."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from adminbot.interfaces.state_store import StateStore
from adminbot.services.conversation_state import ConversationState


@dataclass(slots=True)
class _Entry:
    document: str
    expires_at: float


class InMemoryStateStore(StateStore):
    """Single-process store for local runs and tests.

    Entries are kept serialized so reads go through the same codec as Redis.
    Expired entries are dropped on read and swept on every write.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[int, _Entry] = {}

    async def get(self, operator_id: int) -> ConversationState | None:
        entry = self._entries.get(operator_id)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._entries.pop(operator_id, None)
            return None
        return ConversationState.from_json(entry.document)

    async def set(self, operator_id: int, state: ConversationState, ttl: timedelta) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[operator_id] = _Entry(
            document=state.to_json(),
            expires_at=now + ttl.total_seconds(),
        )

    async def delete(self, operator_id: int) -> None:
        self._entries.pop(operator_id, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: float) -> None:
        """Drop every expired entry, not just the one being written."""
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
