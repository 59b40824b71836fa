import asyncio

import pytest

from soakscale.platform.errors import EventJournalLostError, PlatformUnavailableError
from soakscale.platform.local import LocalBroker, LocalMap


class TestLocalBrokerQueues:
    @pytest.mark.asyncio
    async def test_publish_then_consume_in_order(self):
        broker = LocalBroker()

        for value in range(5):
            await broker.publish("queue", value)

        consumed = []
        async for value in broker.consume("queue"):
            consumed.append(value)
            if len(consumed) == 5:
                break

        assert consumed == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_consumer_waits_for_items(self):
        broker = LocalBroker()

        async def first_value():
            async for value in broker.consume("queue"):
                return value

        waiter = asyncio.create_task(first_value())
        await asyncio.sleep(0.01)
        assert not waiter.done()

        await broker.publish("queue", "late")

        assert await asyncio.wait_for(waiter, timeout=1.0) == "late"

    @pytest.mark.asyncio
    async def test_close_ends_consumers_and_rejects_publish(self):
        broker = LocalBroker()

        async def drain():
            return [value async for value in broker.consume("queue")]

        consumer = asyncio.create_task(drain())
        await asyncio.sleep(0.01)
        await broker.close()

        assert await asyncio.wait_for(consumer, timeout=1.0) == []

        with pytest.raises(PlatformUnavailableError):
            await broker.publish("queue", 1)

    @pytest.mark.asyncio
    async def test_injected_publish_failures(self):
        broker = LocalBroker()
        broker.fail_publishes(2)

        for _ in range(2):
            with pytest.raises(PlatformUnavailableError):
                await broker.publish("queue", 1)

        await broker.publish("queue", 1)
        assert len(broker.get_queue("queue")) == 1


class TestLocalMapJournal:
    @pytest.mark.asyncio
    async def test_set_and_clear_are_journaled(self):
        local_map = LocalMap("journal")

        await local_map.set(0, 0)
        await local_map.set(1, 1)
        await local_map.clear()

        events = local_map.read_from(0)

        assert [event.event_type for event in events] == ["put", "put", "clear"]
        assert [event.offset for event in events] == [0, 1, 2]
        assert len(local_map) == 0

    @pytest.mark.asyncio
    async def test_reader_behind_capacity_loses_journal(self):
        local_map = LocalMap("journal", journal_capacity=3)

        for value in range(5):
            await local_map.set(value, value)

        assert local_map.oldest_offset == 2
        assert [event.value for event in local_map.read_from(2)] == [2, 3, 4]

        with pytest.raises(EventJournalLostError):
            local_map.read_from(1)

    @pytest.mark.asyncio
    async def test_wait_for_offset_wakes_on_append(self):
        local_map = LocalMap("journal")
        waiter = asyncio.create_task(local_map.wait_for_offset(0))

        await asyncio.sleep(0.01)
        assert not waiter.done()

        await local_map.set("key", 1)
        await asyncio.wait_for(waiter, timeout=1.0)

    @pytest.mark.asyncio
    async def test_broker_reuses_named_map(self):
        broker = LocalBroker()
        created = broker.get_map("journal", journal_capacity=10)

        assert broker.get_map("journal") is created
        assert created.journal_capacity == 10
