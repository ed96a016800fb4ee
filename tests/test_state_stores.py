"""Unit tests for the Redis and in-memory state stores."""

from __future__ import annotations

import unittest
from datetime import timedelta
from unittest.mock import AsyncMock

from adminbot.core.exceptions import PayloadValueError
from adminbot.providers.state_stores.memory_store import InMemoryStateStore
from adminbot.providers.state_stores.redis_store import RedisStateStore
from adminbot.services.conversation_state import BotState, ConversationState


def _sample_state() -> ConversationState:
    state = ConversationState(state=BotState.SHOWING_SEARCH_RESULTS, version=3)
    state.put("searchQuery", "jo@x.io")
    state.put("currentPage", 1)
    return state


class RedisStateStoreTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.client = AsyncMock()
        self.store = RedisStateStore(client=self.client, key_prefix="telegram:state:")

    async def test_set_writes_json_with_expiry(self) -> None:
        state = _sample_state()

        await self.store.set(77, state, timedelta(minutes=30))

        self.client.set.assert_awaited_once_with("telegram:state:77", state.to_json(), ex=1800)

    async def test_sub_second_ttl_is_rounded_up(self) -> None:
        await self.store.set(77, _sample_state(), timedelta(milliseconds=200))

        self.assertEqual(self.client.set.await_args.kwargs["ex"], 1)

    async def test_get_absent_returns_none(self) -> None:
        self.client.get.return_value = None

        self.assertIsNone(await self.store.get(77))
        self.client.get.assert_awaited_once_with("telegram:state:77")

    async def test_get_decodes_document(self) -> None:
        state = _sample_state()
        self.client.get.return_value = state.to_json()

        self.assertEqual(await self.store.get(77), state)

    async def test_corrupt_document_raises_payload_error(self) -> None:
        self.client.get.return_value = '{"state": "NOT_A_STATE"}'

        with self.assertRaises(PayloadValueError):
            await self.store.get(77)

    async def test_store_errors_propagate_unmodified(self) -> None:
        self.client.get.side_effect = ConnectionError("redis down")

        with self.assertRaises(ConnectionError):
            await self.store.get(77)

    async def test_delete_and_close(self) -> None:
        await self.store.delete(77)
        await self.store.close()

        self.client.delete.assert_awaited_once_with("telegram:state:77")
        self.client.aclose.assert_awaited_once()


class InMemoryStateStoreTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.now = 1000.0
        self.store = InMemoryStateStore(clock=lambda: self.now)

    async def test_round_trip_returns_copy(self) -> None:
        state = _sample_state()
        await self.store.set(5, state, timedelta(minutes=1))

        loaded = await self.store.get(5)
        loaded.put("currentPage", 9)

        self.assertEqual((await self.store.get(5)).require("currentPage").as_int(), 1)

    async def test_entry_expires_and_is_evicted(self) -> None:
        await self.store.set(5, _sample_state(), timedelta(seconds=30))
        self.now += 30

        self.assertIsNone(await self.store.get(5))
        self.assertEqual(len(self.store), 0)

    async def test_write_sweeps_expired_entries_of_other_operators(self) -> None:
        await self.store.set(5, _sample_state(), timedelta(seconds=30))
        await self.store.set(6, _sample_state(), timedelta(seconds=90))
        self.now += 60

        await self.store.set(7, _sample_state(), timedelta(seconds=30))

        self.assertEqual(len(self.store), 2)
        self.assertIsNone(await self.store.get(5))
        self.assertIsNotNone(await self.store.get(6))

    async def test_delete(self) -> None:
        await self.store.set(5, _sample_state(), timedelta(seconds=30))

        await self.store.delete(5)
        await self.store.delete(5)

        self.assertIsNone(await self.store.get(5))


if __name__ == "__main__":
    unittest.main()
