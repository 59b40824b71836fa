from typing import Any, TypeVar

from .logger_stream import LoggerStream
from .retention_policy import RetentionPolicyConfig


T = TypeVar('T')


class LoggerContext:
    """
    A named logging context owning one stream. Entering the context opens
    its log file and yields the stream; the stream stays open across
    ``async with`` blocks and concurrent holders until ``Logger.close()``.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        retention_policy: RetentionPolicyConfig | None = None,
        models: dict[
            str,
            tuple[
                type[T],
                dict[str, Any],
            ]
        ] | None = None,
    ) -> None:
        self.name = name
        self.stream = LoggerStream(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
            retention_policy=retention_policy,
            models=models,
        )

    async def __aenter__(self):
        await self.stream.open_logfile()
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None
