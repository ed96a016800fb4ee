"""Tests for HttpAccountClient against an httpx mock transport."""

from __future__ import annotations

import unittest
from uuid import uuid4

import httpx

from adminbot.core.exceptions import AccountNotFoundError, CollaboratorError
from adminbot.providers.accounts.http_account_client import HttpAccountClient

BASE_URL = "http://accounts.test/api/v1"


class HttpAccountClientTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = lambda request: httpx.Response(200, json={})

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.responder(request)

        self.client = HttpAccountClient(
            BASE_URL,
            client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler)),
        )

    async def asyncTearDown(self) -> None:
        await self.client.close()

    async def test_get_account_parses_camel_case(self) -> None:
        user_id = uuid4()
        self.responder = lambda request: httpx.Response(
            200,
            json={"id": str(user_id), "email": "jo@x.io", "firstName": "Jo", "isBlocked": True},
        )

        account = await self.client.get_account(user_id)

        self.assertEqual(self.requests[0].url.path, f"/api/v1/account/{user_id}")
        self.assertEqual(account.first_name, "Jo")
        self.assertTrue(account.is_blocked)

    async def test_search_sends_paging_params(self) -> None:
        self.responder = lambda request: httpx.Response(
            200,
            json={"content": [], "totalPages": 0, "totalElements": 0, "size": 5, "number": 2},
        )

        page = await self.client.search_by_email("jo@x.io", 2, 5)

        params = self.requests[0].url.params
        self.assertEqual(self.requests[0].url.path, "/api/v1/account/search")
        self.assertEqual((params["email"], params["page"], params["size"]), ("jo@x.io", "2", "5"))
        self.assertTrue(page.is_empty)

    async def test_block_and_unblock_use_put(self) -> None:
        user_id = uuid4()
        self.responder = lambda request: httpx.Response(200)

        await self.client.block_account(user_id)
        await self.client.unblock_account(user_id)

        self.assertEqual(
            [(request.method, request.url.path) for request in self.requests],
            [
                ("PUT", f"/api/v1/account/block/{user_id}"),
                ("PUT", f"/api/v1/account/unblock/{user_id}"),
            ],
        )

    async def test_404_maps_to_account_not_found(self) -> None:
        self.responder = lambda request: httpx.Response(404)

        with self.assertRaises(AccountNotFoundError):
            await self.client.get_account(uuid4())

    async def test_server_error_maps_to_collaborator_error(self) -> None:
        self.responder = lambda request: httpx.Response(503)

        with self.assertRaises(CollaboratorError) as ctx:
            await self.client.search_by_email("jo@x.io", 0, 5)
        self.assertNotIsInstance(ctx.exception, AccountNotFoundError)

    async def test_transport_error_maps_to_collaborator_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.responder = refuse

        with self.assertRaises(CollaboratorError):
            await self.client.block_account(uuid4())


if __name__ == "__main__":
    unittest.main()
