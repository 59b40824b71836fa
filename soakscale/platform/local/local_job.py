from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Coroutine, Set

from soakscale.platform.errors import (
    JobFailedError,
    JobStateError,
    SnapshotNotFoundError,
)
from soakscale.platform.models import (
    JobConfig,
    JobStatus,
    MapJournalPipeline,
    Pipeline,
    ProcessingGuarantee,
    QueueRelayPipeline,
    TERMINAL_STATUSES,
)
from soakscale.soak.verification import ParityVerifier

from .local_broker import LocalBroker
from .local_job_state_snapshot import JournalProgress, LocalJobStateSnapshot

if TYPE_CHECKING:
    from .local_platform import LocalPlatform


class LocalJob:
    """
    A job executing in-process.

    Lifecycle requests return as soon as they are accepted. Starting takes
    ``startup_delay`` seconds, so callers have to poll ``status()`` for
    RUNNING the same way they would against a real cluster.

    Relay jobs move items between queues with no await point between the
    take and the put, so halting the job never loses or duplicates an
    item. Journal jobs keep their journal offset and verifier state as job
    state; automatic snapshots, restarts and exported snapshots all work on
    that state.
    """

    def __init__(
        self,
        job_id: str,
        pipeline: Pipeline,
        config: JobConfig,
        platform: LocalPlatform,
        broker: LocalBroker,
        initial_state: JournalProgress | None = None,
        startup_delay: float = 0.0,
    ) -> None:
        self._job_id = job_id
        self._pipeline = pipeline
        self._config = config
        self._platform = platform
        self._broker = broker
        self._startup_delay = startup_delay

        self._status = JobStatus.NOT_RUNNING
        self._tasks: Set[asyncio.Task] = set()
        self._terminated = asyncio.Event()
        self._failure: BaseException | None = None

        self._last_snapshot: JournalProgress | None = None
        self._has_own_snapshot = False
        self._completed_snapshots = 0

        self._offset = 0
        self._verifier: ParityVerifier | None = None
        self._restore(initial_state)

    @property
    def job_id(self):
        return self._job_id

    @property
    def name(self):
        return self._config.name

    @property
    def config(self):
        return self._config

    @property
    def pipeline(self):
        return self._pipeline

    @property
    def verifier(self):
        return self._verifier

    @property
    def failure(self):
        return self._failure

    async def status(self):
        self._platform.check_status_query()
        return self._status

    async def completed_snapshots(self):
        return self._completed_snapshots

    async def join(self):
        await self._terminated.wait()

        if self._status == JobStatus.FAILED:
            raise JobFailedError(self.name, self._failure)

    def start(self):
        self._launch()

    async def suspend(self):
        self._require("suspend", JobStatus.RUNNING)

        await self._halt()
        self._take_snapshot()
        self._set_status(JobStatus.SUSPENDED)

    async def resume(self):
        self._require("resume", JobStatus.SUSPENDED)

        if self._restore_latest():
            self._launch()

        else:
            await self._fail_missing_snapshot()

    async def restart(self):
        self._require("restart", JobStatus.RUNNING)

        await self._halt()

        if self._restore_latest():
            self._launch()

        else:
            await self._fail_missing_snapshot()

    async def cancel(self):
        if self._status in TERMINAL_STATUSES:
            return

        self._set_status(JobStatus.COMPLETING)
        await self._halt()
        self._terminate(JobStatus.CANCELLED)

    async def cancel_and_export_snapshot(self, name: str):
        self._require(
            "export a snapshot of",
            JobStatus.RUNNING,
            JobStatus.SUSPENDED,
        )

        if self._status == JobStatus.RUNNING:
            await self._halt()
            state = self._capture()

        else:
            state = self._last_snapshot

        self._set_status(JobStatus.SUSPENDED_EXPORTING_SNAPSHOT)
        snapshot = self._platform.register_snapshot(name, state)
        self._terminate(JobStatus.CANCELLED)

        return snapshot

    async def fail(self, cause: BaseException | str):
        """Force the job into FAILED, as a member crash would."""
        await self._fail(cause)

    def _launch(self):
        self._set_status(JobStatus.STARTING)
        self._spawn(self._start_after_delay())

    async def _start_after_delay(self):
        await asyncio.sleep(self._startup_delay)

        self._set_status(JobStatus.RUNNING)

        if isinstance(self._pipeline, QueueRelayPipeline):
            self._spawn(self._run_worker(self._relay))

        elif isinstance(self._pipeline, MapJournalPipeline):
            self._spawn(self._run_worker(self._read_journal))

        if (
            self._config.processing_guarantee != ProcessingGuarantee.NONE
            and self._config.snapshot_interval > 0
        ):
            self._spawn(self._run_worker(self._checkpoint))

    async def _relay(self):
        source = self._broker.get_queue(self._pipeline.source_queue)
        sink = self._broker.get_queue(self._pipeline.sink_queue)

        while True:
            await source.wait_for_items()

            while len(source) > 0:
                sink.put(source.take())

    async def _read_journal(self):
        source = self._broker.get_map(self._pipeline.map_name)

        while True:
            await source.wait_for_offset(self._offset)

            for event in source.read_from(self._offset):
                self._offset = event.offset + 1

                if event.event_type == "put" and self._verifier.accepts(event.value):
                    self._verifier.accept(event.value)

    async def _checkpoint(self):
        while True:
            await asyncio.sleep(self._config.snapshot_interval)
            self._take_snapshot()

    async def _run_worker(
        self,
        worker: Callable[[], Coroutine[Any, Any, None]],
    ):
        try:
            await worker()

        except asyncio.CancelledError:
            raise

        except Exception as err:
            await self._fail(err)

    async def _fail(self, cause: BaseException | str):
        if self._status in TERMINAL_STATUSES:
            return

        self._failure = cause
        self._set_status(JobStatus.FAILED)
        await self._halt()
        self._terminated.set()

    async def _fail_missing_snapshot(self):
        await self._fail(
            SnapshotNotFoundError(self._config.initial_snapshot_name)
        )

    async def _halt(self):
        current = asyncio.current_task()
        tasks = [task for task in self._tasks if task is not current]

        for task in tasks:
            task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None]):
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _terminate(self, status: JobStatus):
        self._set_status(status)
        self._terminated.set()

    def _require(self, operation: str, *statuses: JobStatus):
        if self._status not in statuses:
            raise JobStateError(self.name, operation, self._status.value)

    def _set_status(self, status: JobStatus):
        self._status = status
        self._platform.record_event(
            "job",
            self.name,
            status.value,
            job_id=self._job_id,
        )

    def _take_snapshot(self):
        self._last_snapshot = self._capture()
        self._has_own_snapshot = True
        self._completed_snapshots += 1

    def _capture(self):
        if self._verifier is None:
            return None

        return JournalProgress(
            offset=self._offset,
            verifier=self._verifier.export_state(),
        )

    def _restore_latest(self):
        if self._has_own_snapshot:
            self._restore(self._last_snapshot)
            return True

        initial_snapshot_name = self._config.initial_snapshot_name
        if initial_snapshot_name is None:
            self._restore(None)
            return True

        snapshot: LocalJobStateSnapshot | None = self._platform.find_snapshot(
            initial_snapshot_name
        )
        if snapshot is None:
            return False

        self._restore(snapshot.state)
        return True

    def _restore(self, state: JournalProgress | None):
        if not isinstance(self._pipeline, MapJournalPipeline):
            return

        if state is None:
            source = self._broker.get_map(self._pipeline.map_name)
            self._offset = (
                source.oldest_offset
                if self._pipeline.start_from_oldest
                else source.next_offset
            )
            self._verifier = ParityVerifier(self._pipeline.odds)
            return

        self._offset = state.offset
        self._verifier = ParityVerifier.restore(
            state.verifier,
            odds=self._pipeline.odds,
        )
