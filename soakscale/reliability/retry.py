"""
Retry execution with backoff and jitter.

Used wherever the harness talks to the platform under test and a failed
call may simply mean the cluster is briefly unreachable (a member is
restarting, the cluster is rescaling, a client is reconnecting).
"""

import asyncio
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


class JitterStrategy(Enum):
    """
    Jitter strategies for retry delays.

    FULL: Maximum spread, best for independent clients
        delay = random(0, min(cap, base * 2^attempt))

    EQUAL: Guarantees minimum delay while spreading
        temp = min(cap, base * 2^attempt)
        delay = temp/2 + random(0, temp/2)

    NONE: No jitter, pure exponential backoff
        delay = min(cap, base * 2^attempt)

    With NONE and max_delay == base_delay every retry waits exactly
    base_delay, which is what fixed-interval polling wants.
    """

    FULL = "full"
    EQUAL = "equal"
    NONE = "none"


@dataclass(slots=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 0.5  # seconds
    max_delay: float = 30.0  # cap
    jitter: JitterStrategy = JitterStrategy.FULL

    # Exceptions that should trigger a retry
    retryable_exceptions: tuple[type[Exception], ...] = field(
        default_factory=lambda: (
            ConnectionError,
            TimeoutError,
            OSError,
        )
    )

    # Optional: function to determine if an exception is retryable
    is_retryable: Callable[[Exception], bool] | None = None

    @classmethod
    def fixed_interval(
        cls,
        max_attempts: int,
        interval: float,
    ) -> "RetryConfig":
        return cls(
            max_attempts=max_attempts,
            base_delay=interval,
            max_delay=interval,
            jitter=JitterStrategy.NONE,
        )


class RetryExecutor:
    """
    Unified retry execution with jitter.

    Example usage:
        executor = RetryExecutor(RetryConfig(max_attempts=3))

        status = await executor.execute(
            job.status,
            operation_name="job status",
        )
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        on_retry: Callable[[Exception, int], Awaitable[None]] | None = None,
    ):
        self._config = config or RetryConfig()
        self._on_retry = on_retry

    @property
    def config(self):
        return self._config

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay with jitter for given attempt.

        Args:
            attempt: Zero-based attempt number (0 = first retry after initial failure)

        Returns:
            Delay in seconds before next retry
        """
        base = self._config.base_delay
        cap = self._config.max_delay
        temp = min(cap, base * (2**attempt))

        if self._config.jitter == JitterStrategy.FULL:
            return random.uniform(0, temp)

        elif self._config.jitter == JitterStrategy.EQUAL:
            return temp / 2 + random.uniform(0, temp / 2)

        return temp

    def _is_retryable(self, exc: Exception) -> bool:
        if self._config.is_retryable is not None:
            return self._config.is_retryable(exc)

        return isinstance(exc, self._config.retryable_exceptions)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute operation with retry and jitter.

        Args:
            operation: Async callable to execute
            operation_name: Name for error messages

        Returns:
            Result of successful operation

        Raises:
            The last retryable exception if all attempts are exhausted, or
            the first non-retryable exception immediately.
        """
        if self._config.max_attempts < 1:
            raise ValueError(
                f"{operation_name} requires at least one attempt"
            )

        for attempt in range(self._config.max_attempts):
            try:
                return await operation()

            except Exception as exc:
                if not self._is_retryable(exc):
                    raise

                if attempt >= self._config.max_attempts - 1:
                    raise

                if self._on_retry:
                    await self._on_retry(exc, attempt + 1)

                await asyncio.sleep(self.calculate_delay(attempt))

        raise RuntimeError(f"{operation_name} failed without exception")
