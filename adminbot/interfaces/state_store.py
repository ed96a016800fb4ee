"""Interface contract for conversation state storage."""

from abc import ABC, abstractmethod
from datetime import timedelta

from adminbot.services.conversation_state import ConversationState


class StateStore(ABC):
    """Key-value store with per-key expiry holding one state per operator."""

    @abstractmethod
    async def get(self, operator_id: int) -> ConversationState | None:
        """Return the stored state, or None when absent or expired."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, operator_id: int, state: ConversationState, ttl: timedelta) -> None:
        """Write the state and (re)start its expiry window."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, operator_id: int) -> None:
        """Remove the stored state if present."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the store."""
