import asyncio
import datetime
import io
import os
import pathlib
import sys
from typing import (
    Any,
    Dict,
    Tuple,
    TypeVar,
)

import msgspec
import zstandard

from soakscale.logging.config.logging_config import LoggingConfig
from soakscale.logging.config.stream_type import StreamType
from soakscale.logging.models import Entry, Log, LogLevel

from .retention_policy import (
    RetentionPolicy,
    RetentionPolicyConfig,
)

T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {task_name} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {task_name} - {filename}:{function_name}.{line_number} - logging failed: {error}"


class LoggerStream:
    """
    Writes the entries of one logging context. Every entry at or above the
    configured level is rendered from the template to stdout or stderr and,
    when the context has a log file, appended to it as a JSON line.

    With a retention policy, a log file that is too old or too large is
    compressed into a ``<name>_<timestamp>_archived.zst`` file next to it
    and started afresh. File creation times are tracked in a
    ``.logging.json`` file in the same directory so ages survive restarts.

    Blocking file and console IO runs in the loop's default executor.
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
        self._name = name or "default"
        self._template = template or DEFAULT_TEMPLATE
        self._filename = filename
        self._directory = directory

        self._retention_policy: RetentionPolicy | None = None
        if retention_policy:
            self._retention_policy = RetentionPolicy.from_config(retention_policy)

        self._init_lock = asyncio.Lock()
        self._file_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._compressor: zstandard.ZstdCompressor | None = None

        self._logfile: io.BufferedWriter | None = None
        self._logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized = False

        # One model per level name, plus "default", unless overridden.
        self._models: Dict[str, Tuple[type[Entry], Dict[str, Any]]] = {
            level.value.lower(): (Entry, {"level": level})
            for level in LogLevel
        }
        self._models["default"] = (Entry, {"level": LogLevel.INFO})
        self._models.update(models or {})

    @property
    def name(self):
        return self._name

    @property
    def initialized(self):
        return self._initialized

    @property
    def logfile_path(self):
        return self._logfile_path

    async def initialize(self):
        async with self._init_lock:
            if self._initialized:
                return

            self._loop = asyncio.get_running_loop()

            if self._compressor is None:
                self._compressor = zstandard.ZstdCompressor()

            self._initialized = True

    async def open_logfile(self) -> str | None:
        if not self._initialized:
            await self.initialize()

        if self._filename is None:
            return None

        if self._logfile_path is None:
            self._logfile_path = self._to_logfile_path(
                self._filename,
                directory=self._directory,
            )

        async with self._file_lock:
            if self._logfile is None or self._logfile.closed:
                self._logfile = await self._loop.run_in_executor(
                    None,
                    self._open_file,
                    self._logfile_path,
                )

        return self._logfile_path

    async def log_prepared(
        self,
        message: str,
        name: str = 'default',
    ):
        filename, function_name, line_number = self._find_caller(1)

        await self.log(
            Log(
                entry=self._to_entry(message, name),
                filename=filename,
                function_name=function_name,
                line_number=line_number,
            )
        )

    async def log(self, entry: T | Log):
        if isinstance(entry, Log):
            log = entry

        else:
            filename, function_name, line_number = self._find_caller(1)
            log = Log(
                entry=entry,
                filename=filename,
                function_name=function_name,
                line_number=line_number,
            )

        if self._config.enabled(log.entry.level) is False:
            return

        if not self._initialized:
            await self.initialize()

        await self._write_to_console(log)

        if logfile_path := await self.open_logfile():
            await self._write_to_logfile(log, logfile_path)

    async def close(self):
        if self._logfile is not None and self._loop is not None:
            async with self._file_lock:
                await self._loop.run_in_executor(
                    None,
                    self._logfile.close,
                )

        self._logfile = None
        self._initialized = False

    def _to_entry(
        self,
        message: str,
        name: str,
    ):
        model, defaults = self._models.get(
            name,
            self._models['default'],
        )

        return model(
            message=message,
            **defaults
        )

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        if filename_path.suffix != ".json":
            raise ValueError(
                f"Log file {filename} must be a JSON file."
            )

        if self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory = os.getcwd()

        return os.path.join(directory, filename_path)

    async def _write_to_console(self, log: Log):
        try:
            line = log.entry.to_template(
                self._template,
                context={
                    "filename": log.filename,
                    "function_name": log.function_name,
                    "line_number": log.line_number,
                    "task_name": log.task_name,
                    "timestamp": log.timestamp,
                },
            )

            await self._loop.run_in_executor(
                None,
                self._write_to_stream,
                self._config.output,
                line,
            )

        except (KeyError, ValueError, OSError) as err:
            self._report_error(log, err)

    def _write_to_stream(
        self,
        stream_type: StreamType,
        line: str,
    ):
        stream = sys.stdout if stream_type == StreamType.STDOUT else sys.stderr
        stream.write(line + "\n")
        stream.flush()

    async def _write_to_logfile(
        self,
        log: Log,
        logfile_path: str,
    ):
        try:
            async with self._file_lock:
                await self._loop.run_in_executor(
                    None,
                    self._append,
                    log,
                    logfile_path,
                )

        except OSError as err:
            self._report_error(log, err)

    def _open_file(self, logfile_path: str):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        return open(str(resolved_path), "ab")

    def _append(
        self,
        log: Log,
        logfile_path: str,
    ):
        if self._retention_policy:
            self._rotate_if_due(logfile_path)

        if self._logfile and self._logfile.closed is False:
            self._logfile.write(msgspec.json.encode(log) + b"\n")
            self._logfile.flush()

    def _rotate_if_due(self, logfile_path: str):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        metadata_path = resolved_path.parent.joinpath(".logging.json")

        metadata: Dict[str, float] = {}
        if metadata_path.exists():
            metadata = msgspec.json.decode(metadata_path.read_bytes())

        current_timestamp = datetime.datetime.now(datetime.UTC).timestamp()
        created_time = metadata.get(logfile_path)

        if created_time is not None and self._retention_policy.should_rotate(
            file_age=current_timestamp - created_time,
            file_size=os.path.getsize(logfile_path),
        ):
            self._logfile.close()
            logfile_data = resolved_path.read_bytes()

            if len(logfile_data) > 0:
                archive_path = resolved_path.parent.joinpath(
                    f"{resolved_path.stem}_{current_timestamp}_archived.zst"
                )
                archive_path.write_bytes(
                    self._compressor.compress(logfile_data)
                )

            self._logfile = open(str(resolved_path), "wb")
            created_time = None

        if created_time is None:
            metadata[logfile_path] = current_timestamp
            metadata_path.write_bytes(msgspec.json.encode(metadata))

    def _report_error(self, log: Log, error: Exception):
        sys.stderr.write(
            ERROR_TEMPLATE.format(
                timestamp=log.timestamp,
                level=log.entry.level.value,
                task_name=log.task_name,
                filename=log.filename,
                function_name=log.function_name,
                line_number=log.line_number,
                error=str(error),
            ) + "\n"
        )

    def _find_caller(self, depth: int):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(depth + 1)
        code = frame.f_code

        return (
            code.co_filename,
            code.co_name,
            frame.f_lineno,
        )
