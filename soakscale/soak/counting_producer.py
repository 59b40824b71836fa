from __future__ import annotations

import asyncio
import functools
from typing import Any, Awaitable, Callable

from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import WorkloadError
from soakscale.platform.protocols import KeyValueStore, MessageTransport


class CountingProducer:
    """
    Publishes the counter workload 0, 1, 2, ... from a background task and
    counts every successful publish.

    A failed publish is logged and retried with the same value after
    ``retry_pause``, so the published sequence never skips or repeats a
    value. Every ``clear_threshold`` successes the optional staging store
    is cleared to bound its size.

    ``stop()`` waits for the loop to finish its current iteration and
    returns the final count, which no longer changes afterwards.
    """

    def __init__(
        self,
        publish: Callable[[int], Awaitable[Any]],
        name: str = "producer",
        pace: float = 0.005,
        retry_pause: float = 1.0,
        staging_store: KeyValueStore | None = None,
        clear_threshold: int = 5000,
        logger: Logger | None = None,
    ) -> None:
        self.name = name
        self._publish = publish
        self._pace = pace
        self._retry_pause = retry_pause
        self._staging_store = staging_store
        self._clear_threshold = clear_threshold
        self._logger = logger or Logger()

        self._count = 0
        self._stopped = asyncio.Event()
        self._task: asyncio.Task | None = None

    @classmethod
    def for_queue(
        cls,
        transport: MessageTransport,
        queue_name: str,
        **kwargs: Any,
    ):
        kwargs.setdefault("name", queue_name)

        return cls(
            functools.partial(transport.publish, queue_name),
            **kwargs,
        )

    @classmethod
    def for_map(
        cls,
        store: KeyValueStore,
        **kwargs: Any,
    ):
        async def set_counter(value: int):
            await store.set(value, value)

        kwargs.setdefault("staging_store", store)

        return cls(
            set_counter,
            **kwargs,
        )

    @property
    def count(self):
        return self._count

    @property
    def running(self):
        return self._task is not None and not self._task.done()

    def start(self):
        if self._task is not None:
            raise RuntimeError(f"Producer {self.name} was already started")

        self._task = asyncio.create_task(self._run())

    async def stop(self) -> int:
        self._stopped.set()

        if self._task is not None:
            await self._task

        return self._count

    async def _run(self):
        value = 0

        while not self._stopped.is_set():
            try:
                await self._publish(value)

            except Exception as err:
                await self._logger.log(
                    WorkloadError(
                        message=f"Publishing {value} to {self.name} failed ({err}), retrying",
                        workload=self.name,
                        value=value,
                    )
                )

                await asyncio.sleep(self._retry_pause)
                continue

            value += 1
            self._count = value

            if (
                self._staging_store is not None
                and self._clear_threshold > 0
                and value % self._clear_threshold == 0
            ):
                await self._clear_staging_store(value)

            await asyncio.sleep(self._pace)

    async def _clear_staging_store(self, value: int):
        try:
            await self._staging_store.clear()

        except Exception as err:
            await self._logger.log(
                WorkloadError(
                    message=f"Clearing the staging store of {self.name} failed ({err})",
                    workload=self.name,
                    value=value,
                )
            )
