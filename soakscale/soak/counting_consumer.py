import asyncio
from typing import Any, Callable

from soakscale.platform.protocols import MessageTransport


class CountingConsumer:
    """
    Drains a queue from a background task and counts what it sees. The
    count only ever grows and is frozen once ``stop()`` returns.
    """

    def __init__(
        self,
        transport: MessageTransport,
        queue_name: str,
        on_value: Callable[[Any], None] | None = None,
    ) -> None:
        self.queue_name = queue_name
        self._transport = transport
        self._on_value = on_value

        self._count = 0
        self._task: asyncio.Task | None = None

    @property
    def count(self):
        return self._count

    def get_count(self):
        return self._count

    def start(self):
        if self._task is not None:
            raise RuntimeError(f"Consumer for {self.queue_name} was already started")

        self._task = asyncio.create_task(self._run())

    async def stop(self) -> int:
        if self._task is None:
            return self._count

        if not self._task.done():
            self._task.cancel()

            try:
                await self._task
            except asyncio.CancelledError:
                pass

        elif not self._task.cancelled() and (error := self._task.exception()):
            raise error

        return self._count

    async def _run(self):
        async for value in self._transport.consume(self.queue_name):
            self._count += 1

            if self._on_value:
                self._on_value(value)
