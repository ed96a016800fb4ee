"""Interface contract for the account micro-service."""

from abc import ABC, abstractmethod
from uuid import UUID

from adminbot.schemas.accounts import AccountDto, AccountPage


class AccountClient(ABC):
    """Lookup, search and moderation of end-user accounts."""

    @abstractmethod
    async def get_account(self, user_id: UUID) -> AccountDto:
        """Return one account or raise AccountNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def search_by_email(self, query: str, page: int, size: int) -> AccountPage:
        """Return one zero-based page of accounts whose email matches the query."""
        raise NotImplementedError

    @abstractmethod
    async def block_account(self, user_id: UUID) -> None:
        """Block an account."""
        raise NotImplementedError

    @abstractmethod
    async def unblock_account(self, user_id: UUID) -> None:
        """Unblock an account."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the client."""
