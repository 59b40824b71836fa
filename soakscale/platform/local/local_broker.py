import asyncio
import itertools
from collections import deque
from typing import Any, AsyncIterator, Dict, List, Literal

import msgspec

from soakscale.platform.errors import (
    EventJournalLostError,
    PlatformUnavailableError,
)

DEFAULT_JOURNAL_CAPACITY = 10_000

JournalEventType = Literal["put", "clear"]


class JournalEvent(msgspec.Struct, frozen=True, kw_only=True):
    offset: int
    event_type: JournalEventType
    key: Any = None
    value: Any = None


class LocalQueue:
    def __init__(self, name: str) -> None:
        self.name = name
        self._items: deque[Any] = deque()
        self._available = asyncio.Event()

    def __len__(self):
        return len(self._items)

    def put(self, value: Any):
        self._items.append(value)
        self._available.set()

    def take(self):
        value = self._items.popleft()

        if len(self._items) < 1:
            self._available.clear()

        return value

    async def wait_for_items(self):
        await self._available.wait()


class LocalMap:
    """
    Map with an event journal of bounded capacity. Readers track their own
    offset and fail once the journal has dropped events they have not read.
    """

    def __init__(
        self,
        name: str,
        journal_capacity: int = DEFAULT_JOURNAL_CAPACITY,
    ) -> None:
        self.name = name
        self.journal_capacity = journal_capacity
        self._entries: Dict[Any, Any] = {}
        self._journal: deque[JournalEvent] = deque(maxlen=journal_capacity)
        self._next_offset = 0
        self._appended = asyncio.Event()
        self._write_faults = 0

    def __len__(self):
        return len(self._entries)

    @property
    def next_offset(self):
        return self._next_offset

    @property
    def oldest_offset(self):
        return self._next_offset - len(self._journal)

    def get(self, key: Any):
        return self._entries.get(key)

    def fail_writes(self, count: int):
        self._write_faults = count

    async def set(self, key: Any, value: Any):
        self._check_write_fault()

        self._entries[key] = value
        self._append(
            JournalEvent(
                offset=self._next_offset,
                event_type="put",
                key=key,
                value=value,
            )
        )

    async def clear(self):
        self._check_write_fault()

        self._entries.clear()
        self._append(
            JournalEvent(
                offset=self._next_offset,
                event_type="clear",
            )
        )

    def read_from(self, offset: int) -> List[JournalEvent]:
        oldest_offset = self.oldest_offset
        if offset < oldest_offset:
            raise EventJournalLostError(self.name, offset, oldest_offset)

        return list(
            itertools.islice(
                self._journal,
                offset - oldest_offset,
                None,
            )
        )

    async def wait_for_offset(self, offset: int):
        while self._next_offset <= offset:
            await self._appended.wait()

    def _append(self, event: JournalEvent):
        self._journal.append(event)
        self._next_offset += 1

        appended = self._appended
        self._appended = asyncio.Event()
        appended.set()

    def _check_write_fault(self):
        if self._write_faults > 0:
            self._write_faults -= 1
            raise PlatformUnavailableError(f"Map {self.name} is unreachable")


class LocalBroker:
    """
    In-process message broker holding named queues and journaled maps.
    Queues and maps are created on first use.
    """

    def __init__(self, name: str = "broker") -> None:
        self.name = name
        self._queues: Dict[str, LocalQueue] = {}
        self._maps: Dict[str, LocalMap] = {}
        self._publish_faults = 0
        self._closed = False
        self._close_waiter = asyncio.Event()

    @property
    def closed(self):
        return self._closed

    def get_queue(self, name: str):
        if (queue := self._queues.get(name)) is None:
            queue = LocalQueue(name)
            self._queues[name] = queue

        return queue

    def get_map(
        self,
        name: str,
        journal_capacity: int | None = None,
    ):
        if (local_map := self._maps.get(name)) is None:
            local_map = LocalMap(
                name,
                journal_capacity=journal_capacity or DEFAULT_JOURNAL_CAPACITY,
            )
            self._maps[name] = local_map

        return local_map

    def fail_publishes(self, count: int):
        self._publish_faults = count

    async def publish(self, queue_name: str, value: Any):
        if self._closed:
            raise PlatformUnavailableError(f"Broker {self.name} is closed")

        if self._publish_faults > 0:
            self._publish_faults -= 1
            raise PlatformUnavailableError(f"Broker {self.name} is unreachable")

        self.get_queue(queue_name).put(value)

    async def consume(self, queue_name: str) -> AsyncIterator[Any]:
        queue = self.get_queue(queue_name)

        while not self._closed:
            if len(queue) > 0:
                yield queue.take()
                continue

            items_waiter = asyncio.ensure_future(queue.wait_for_items())
            close_waiter = asyncio.ensure_future(self._close_waiter.wait())

            try:
                await asyncio.wait(
                    [items_waiter, close_waiter],
                    return_when=asyncio.FIRST_COMPLETED,
                )

            finally:
                items_waiter.cancel()
                close_waiter.cancel()

    async def close(self):
        self._closed = True
        self._close_waiter.set()
