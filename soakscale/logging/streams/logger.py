from __future__ import annotations

import asyncio
import pathlib
import sys
from typing import (
    Any,
    Dict,
    TypeVar,
)

from soakscale.logging.models import Entry, Log

from .logger_context import LoggerContext
from .retention_policy import RetentionPolicyConfig

T = TypeVar('T', bound=Entry)


def _split_path(path: str | None):
    if path is None:
        return None, None

    logfile_path = pathlib.Path(path)

    if logfile_path.suffix:
        return logfile_path.name, str(logfile_path.parent.absolute())

    return None, str(logfile_path.absolute())


class Logger:
    """
    Entry point for structured logging. Components hold a ``Logger`` and
    call ``log(entry)``; whoever owns the run ``configure()``s the default
    context with its log file and per-level entry models, and calls
    ``close()`` when done.

    Example usage:
        logger = Logger()
        logger.configure(path="logs/relay.json")

        async with logger.context() as ctx:
            await ctx.log_prepared("relay started", name="info")

        await logger.log(SoakInfo(message="...", test="relay", environment="stable"))
        await logger.close()
    """

    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        retention_policy: RetentionPolicyConfig | None = None,
        models: dict[
            str,
            tuple[
                type[T],
                dict[str, Any],
            ]
        ] | None = None,
    ):
        name = name or 'default'
        filename, directory = _split_path(path)

        self._contexts[name] = LoggerContext(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
            retention_policy=retention_policy,
            models=models,
        )

    def context(self, name: str | None = None) -> LoggerContext:
        name = name or 'default'

        if (context := self._contexts.get(name)) is None:
            context = LoggerContext(name=name)
            self._contexts[name] = context

        return context

    async def log(
        self,
        entry: T,
        name: str | None = None,
    ):
        frame = sys._getframe(1)
        code = frame.f_code

        async with self.context(name) as ctx:
            await ctx.log(
                Log(
                    entry=entry,
                    filename=code.co_filename,
                    function_name=code.co_name,
                    line_number=frame.f_lineno,
                )
            )

    async def close(self):
        if len(self._contexts) > 0:
            await asyncio.gather(*[
                context.stream.close() for context in self._contexts.values()
            ])
