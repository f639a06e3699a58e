"""
Tests
"""

import asyncio

import pytest

from toyvss.errors import DuplicateMessage, TransportUnavailable
from toyvss.feldman import VssLocalScheme
from toyvss.transport import MessageKey, MessageKind, MessageStore


def test_push_get():
    async def scenario():
        store = MessageStore()
        com = VssLocalScheme.new(2).commit()
        await store.broadcast(MessageKind.COMMITMENT, 1, com)
        await store.publish(MessageKind.SHARE, 2, 3, 12345)

        assert await store.receive(MessageKind.COMMITMENT, 1, 0) == com
        assert await store.receive(MessageKind.SHARE, 2, 3) == 12345
        assert len(store) == 2
        assert MessageKey(MessageKind.SHARE, 2, 3) in store

    asyncio.run(scenario())


def test_receive_waits_for_publish():
    async def scenario():
        store = MessageStore()
        waiter = asyncio.ensure_future(store.receive(MessageKind.SHARE, 1, 2))
        await asyncio.sleep(0)
        assert not waiter.done()
        await store.publish(MessageKind.SHARE, 1, 2, 7)
        assert await waiter == 7

    asyncio.run(scenario())


def test_keys_do_not_alias():
    async def scenario():
        store = MessageStore()
        await asyncio.gather(*(
            store.publish(MessageKind.SHARE, sender, recipient, sender * 100 + recipient)
            for sender in range(1, 5) for recipient in range(1, 5)))
        for sender in range(1, 5):
            for recipient in range(1, 5):
                assert await store.receive(MessageKind.SHARE, sender, recipient) == sender * 100 + recipient
        # same ids, different kind
        await store.publish(MessageKind.AGGREGATED_SECRET, 1, 2, 1)
        assert await store.receive(MessageKind.SHARE, 1, 2) == 102

    asyncio.run(scenario())


def test_duplicate_publish():
    async def scenario():
        store = MessageStore()
        await store.publish(MessageKind.SHARE, 1, 2, 5)
        with pytest.raises(DuplicateMessage):
            await store.publish(MessageKind.SHARE, 1, 2, 6)
        assert await store.receive(MessageKind.SHARE, 1, 2) == 5

    asyncio.run(scenario())


def test_receive_timeout():
    async def scenario():
        store = MessageStore()
        with pytest.raises(TransportUnavailable) as e:
            await store.receive(MessageKind.COMMITMENT, 4, 0, timeout=0.05)
        assert str(e.value.key) == "vss_com/4->0"

    asyncio.run(scenario())


def test_payload_kind_checked():
    async def scenario():
        store = MessageStore()
        with pytest.raises(TypeError):
            await store.publish(MessageKind.COMMITMENT, 1, 0, [1, 2, 3])
        with pytest.raises(TypeError):
            await store.publish(MessageKind.SHARE, 1, 2, "12")

    asyncio.run(scenario())


def test_store_survives_new_event_loop():
    store = MessageStore()

    async def write():
        await store.publish(MessageKind.SHARE, 1, 2, 9)

    async def read():
        return await store.receive(MessageKind.SHARE, 1, 2)

    asyncio.run(write())
    assert asyncio.run(read()) == 9
