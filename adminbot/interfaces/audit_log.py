"""Interface contract for the audit trail writer."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID


class AuditLogWriter(ABC):
    """Records administrative actions in durable storage."""

    @abstractmethod
    async def log_action(
        self,
        action_type: str,
        operator_id: int,
        target_user_id: UUID | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Persist one audit record."""
        raise NotImplementedError
