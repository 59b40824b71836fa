import asyncio
import inspect
from typing import Awaitable, Callable

from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import CountDebug

from .errors import ReconciliationMismatchError

CountSource = Callable[[], int | Awaitable[int]]


class ReconciliationChecker:
    """
    Awaits equality between a final expected count and a count that is
    still converging, e.g. a consumer draining the tail of a relay chain
    after its producer has stopped.
    """

    def __init__(
        self,
        max_retries: int = 100,
        retry_delay: float = 1.0,
        logger: Logger | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._logger = logger or Logger()

    async def assert_eventual_equality(
        self,
        expected: int,
        actual_source: CountSource,
    ) -> int:
        actual = 0

        for attempt in range(1, self.max_retries + 1):
            actual = await self._read(actual_source)

            await self._logger.log(
                CountDebug(
                    message=f"Reconciling counts, expected {expected}, actual {actual}",
                    expected=expected,
                    actual=actual,
                    attempt=attempt,
                )
            )

            if actual == expected:
                return actual

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay)

        raise ReconciliationMismatchError(
            expected,
            actual,
            self.max_retries,
        )

    async def _read(self, actual_source: CountSource) -> int:
        actual = actual_source()

        if inspect.isawaitable(actual):
            actual = await actual

        return actual
