import asyncio
import datetime

import msgspec

from .entry import Entry


def _current_task_name() -> str:
    try:
        task = asyncio.current_task()

    except RuntimeError:
        task = None

    # Scenario tasks are named after their environment.
    return task.get_name() if task else "main"


class Log(msgspec.Struct, kw_only=True):
    entry: Entry
    filename: str
    function_name: str
    line_number: int
    task_name: str = msgspec.field(
        default_factory=_current_task_name,
    )
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )
