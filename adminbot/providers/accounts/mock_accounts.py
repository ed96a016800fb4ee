"""Mock account client implementation."""

from __future__ import annotations

import math
from uuid import UUID

from adminbot.core.exceptions import AccountNotFoundError
from adminbot.interfaces.account_client import AccountClient
from adminbot.schemas.accounts import AccountDto, AccountPage


class MockAccountClient(AccountClient):
    """In-memory accounts for local runs without the account service."""

    def __init__(self, accounts: list[AccountDto] | None = None) -> None:
        self._accounts: dict[UUID, AccountDto] = {account.id: account for account in accounts or []}

    async def get_account(self, user_id: UUID) -> AccountDto:
        account = self._accounts.get(user_id)
        if account is None:
            raise AccountNotFoundError(f"Account {user_id} not found.")
        return account

    async def search_by_email(self, query: str, page: int, size: int) -> AccountPage:
        needle = query.lower()
        matches = sorted(
            (account for account in self._accounts.values() if needle in (account.email or "").lower()),
            key=lambda account: account.email or "",
        )
        start = page * size
        return AccountPage(
            content=matches[start : start + size],
            total_pages=math.ceil(len(matches) / size) if size else 0,
            total_elements=len(matches),
            size=size,
            number=page,
        )

    async def block_account(self, user_id: UUID) -> None:
        account = await self.get_account(user_id)
        self._accounts[user_id] = account.model_copy(update={"is_blocked": True})

    async def unblock_account(self, user_id: UUID) -> None:
        account = await self.get_account(user_id)
        self._accounts[user_id] = account.model_copy(update={"is_blocked": False})

    def add_account(self, account: AccountDto) -> None:
        """Helper for tests/debugging; not part of AccountClient contract."""
        self._accounts[account.id] = account
