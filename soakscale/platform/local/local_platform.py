import itertools
from typing import Dict, List

import msgspec

from soakscale.platform.errors import (
    PlatformUnavailableError,
    SnapshotNotFoundError,
)
from soakscale.platform.models import JobConfig, Pipeline

from .local_broker import LocalBroker
from .local_job import LocalJob
from .local_job_state_snapshot import JournalProgress, LocalJobStateSnapshot


class PlatformEvent(msgspec.Struct, frozen=True, kw_only=True):
    kind: str
    subject: str
    detail: str
    job_id: str | None = None


class LocalPlatform:
    """
    In-process streaming platform. Jobs run as asyncio tasks against the
    queues and maps of a ``LocalBroker``; exported snapshots are kept by
    name until destroyed.

    Every job status change and snapshot export/destroy is appended to
    ``history`` in the order it happened.
    """

    def __init__(
        self,
        name: str = "local",
        broker: LocalBroker | None = None,
        startup_delay: float = 0.0,
    ) -> None:
        self.name = name
        self.broker = broker or LocalBroker()
        self.startup_delay = startup_delay

        self._ids = itertools.count(1)
        self._jobs: List[LocalJob] = []
        self._snapshots: Dict[str, LocalJobStateSnapshot] = {}
        self._history: List[PlatformEvent] = []
        self._status_faults = 0
        self._closed = False

    @property
    def closed(self):
        return self._closed

    @property
    def jobs(self):
        return list(self._jobs)

    @property
    def snapshots(self):
        return dict(self._snapshots)

    @property
    def history(self):
        return list(self._history)

    async def submit(
        self,
        pipeline: Pipeline,
        config: JobConfig,
    ):
        self._check_open()

        initial_state: JournalProgress | None = None
        if config.initial_snapshot_name:
            snapshot = self._snapshots.get(config.initial_snapshot_name)
            if snapshot is None:
                raise SnapshotNotFoundError(config.initial_snapshot_name)

            initial_state = snapshot.state

        job = LocalJob(
            f"{self.name}-{next(self._ids)}",
            pipeline,
            config,
            self,
            self.broker,
            initial_state=initial_state,
            startup_delay=self.startup_delay,
        )

        self._jobs.append(job)
        job.start()

        return job

    def get_map(
        self,
        name: str,
        journal_capacity: int | None = None,
    ):
        return self.broker.get_map(
            name,
            journal_capacity=journal_capacity,
        )

    def find_snapshot(self, name: str):
        return self._snapshots.get(name)

    def register_snapshot(
        self,
        name: str,
        state: JournalProgress | None,
    ):
        snapshot = LocalJobStateSnapshot(name, state, self)
        self._snapshots[name] = snapshot
        self.record_event("snapshot", name, "exported")

        return snapshot

    def remove_snapshot(self, snapshot: LocalJobStateSnapshot):
        if self._snapshots.get(snapshot.name) is snapshot:
            del self._snapshots[snapshot.name]

        self.record_event("snapshot", snapshot.name, "destroyed")

    def fail_status_queries(self, count: int):
        """Make the next ``count`` status queries raise PlatformUnavailableError."""
        self._status_faults = count

    def check_status_query(self):
        self._check_open()

        if self._status_faults > 0:
            self._status_faults -= 1
            raise PlatformUnavailableError(f"Platform {self.name} is unreachable")

    def record_event(
        self,
        kind: str,
        subject: str,
        detail: str,
        job_id: str | None = None,
    ):
        self._history.append(
            PlatformEvent(
                kind=kind,
                subject=subject,
                detail=detail,
                job_id=job_id,
            )
        )

    async def shutdown(self):
        if self._closed:
            return

        # The in-process cluster goes away with its client.
        for job in self._jobs:
            await job.cancel()

        self._closed = True

    def _check_open(self):
        if self._closed:
            raise PlatformUnavailableError(f"Platform {self.name} is shut down")
