"""Account micro-service client over HTTP."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx

from adminbot.core.exceptions import AccountNotFoundError, CollaboratorError
from adminbot.interfaces.account_client import AccountClient
from adminbot.schemas.accounts import AccountDto, AccountPage

logger = logging.getLogger(__name__)


class HttpAccountClient(AccountClient):
    """Talks to the account service REST API with a shared httpx.AsyncClient.

    No retries: failures surface as CollaboratorError and the router decides.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def get_account(self, user_id: UUID) -> AccountDto:
        data = await self._request("GET", f"/account/{user_id}", user_id=user_id)
        return AccountDto.model_validate(data)

    async def search_by_email(self, query: str, page: int, size: int) -> AccountPage:
        data = await self._request(
            "GET",
            "/account/search",
            params={"email": query, "page": page, "size": size},
        )
        return AccountPage.model_validate(data)

    async def block_account(self, user_id: UUID) -> None:
        await self._request("PUT", f"/account/block/{user_id}", user_id=user_id)
        logger.info("Account %s blocked", user_id)

    async def unblock_account(self, user_id: UUID) -> None:
        await self._request("PUT", f"/account/unblock/{user_id}", user_id=user_id)
        logger.info("Account %s unblocked", user_id)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        user_id: UUID | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404 and user_id is not None:
                raise AccountNotFoundError(f"Account {user_id} not found.") from exc
            logger.error("Account service %s %s failed with status %s", method, path, status)
            raise CollaboratorError(f"Account service returned {status} for {method} {path}.") from exc
        except httpx.RequestError as exc:
            logger.error("Account service %s %s unreachable: %s", method, path, exc)
            raise CollaboratorError(f"Account service unreachable: {exc}") from exc

        if not response.content:
            return None
        return response.json()
