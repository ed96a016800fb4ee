"""Interface contract for operator privilege lookup."""

from abc import ABC, abstractmethod

from adminbot.models.admin import AdminRole


class PrivilegeLookup(ABC):
    """Resolves the role of the operator issuing a command."""

    @abstractmethod
    async def get_role(self, operator_id: int) -> AdminRole | None:
        """Return the operator's role, or None for unknown/inactive operators."""
        raise NotImplementedError
