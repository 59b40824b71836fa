"""
Drives a job through repeated suspend, resume, restart and upgrade cycles.

Each cycle ends by cancelling the job with a snapshot export and
submitting the upgraded pipeline (the parity filter flipped) initialised
from that snapshot. The snapshot is only destroyed once the upgraded job
is RUNNING and has taken a snapshot of its own. Jobs that do not report
their snapshot count get ``max(pause, snapshot_interval)`` instead, which
leaves a window where a failure of the upgraded job before its first
snapshot is unrecoverable.
"""

import asyncio
from typing import Callable

from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import SoakError, SoakInfo
from soakscale.platform.models import JobConfig, JobStatus, Pipeline
from soakscale.platform.protocols import (
    CheckpointAware,
    Job,
    JobStateSnapshot,
    StreamingPlatform,
)

from .errors import JobStatusTimeoutError
from .results import LifecycleReport
from .status_poll_guard import StatusPollGuard

PipelineFactory = Callable[[bool], Pipeline]


class JobLifecycleDriver:
    def __init__(
        self,
        platform: StreamingPlatform,
        config: JobConfig,
        guard: StatusPollGuard,
        logger: Logger | None = None,
        pause: float = 60.0,
        test_name: str = "job-management",
        environment: str = "default",
    ) -> None:
        self._platform = platform
        self._config = config
        self._guard = guard
        self._logger = logger or Logger()
        self._pause = pause
        self._test_name = test_name
        self._environment = environment

    @staticmethod
    def cycle_bound(
        pause: float,
        status_bound: float,
        snapshot_interval: float = 0.0,
    ) -> float:
        """
        Longest a single cycle may take without failing: five pauses and
        five bounded status waits (suspended, resumed, restarted, upgraded
        and the upgraded job's first snapshot). A cycle is only started
        before ``duration`` runs out, so a run may overrun its duration by
        at most this much. Jobs that do not report their snapshots wait
        ``max(pause, snapshot_interval)`` instead of the last status wait.
        """
        return 5 * pause + 5 * status_bound + snapshot_interval

    async def run_lifecycle_cycle(
        self,
        pipeline_factory: PipelineFactory,
        duration: float,
    ) -> LifecycleReport:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration

        report = LifecycleReport(job_name=self._config.name)
        odds = False
        retained: JobStateSnapshot | None = None

        job = await self._submit(pipeline_factory(odds), self._config, report)

        try:
            await self._guard.await_status(job, JobStatus.RUNNING)
            await asyncio.sleep(self._pause)

            while loop.time() < deadline:
                await self._log(f"Suspending job {job.name}")
                await job.suspend()
                await self._guard.await_status(job, JobStatus.SUSPENDED)
                await asyncio.sleep(self._pause)

                await self._log(f"Resuming job {job.name}")
                await job.resume()
                await self._guard.await_status(job, JobStatus.RUNNING)
                await asyncio.sleep(self._pause)

                await self._log(f"Restarting job {job.name}")
                await job.restart()
                await self._guard.await_status(job, JobStatus.RUNNING)
                await asyncio.sleep(self._pause)

                snapshot_name = f"{self._config.name}-snapshot-{report.cycles_completed + 1}"

                await self._log(f"Cancelling job {job.name} with snapshot {snapshot_name}")
                retained = await job.cancel_and_export_snapshot(snapshot_name)
                report.snapshots_exported += 1
                await asyncio.sleep(self._pause)

                odds = not odds
                report.final_odds = odds

                await self._log(
                    f"Upgrading job {job.name} to {'odds' if odds else 'evens'} from snapshot {snapshot_name}"
                )
                job = await self._submit(
                    pipeline_factory(odds),
                    self._config.with_initial_snapshot(snapshot_name),
                    report,
                )
                await self._guard.await_status(job, JobStatus.RUNNING)
                await self._await_own_snapshot(job)

                await retained.destroy()
                retained = None
                report.snapshots_destroyed += 1

                report.cycles_completed += 1
                await asyncio.sleep(self._pause)

        except (Exception, asyncio.CancelledError) as err:
            await self._log(
                f"Lifecycle of job {job.name} failed ({type(err).__name__}: {err})",
                entry_type=SoakError,
            )
            await self._abandon(job, retained, report)
            raise

        await job.cancel()
        await self._log(
            f"Lifecycle of job {job.name} finished after {report.cycles_completed} cycles"
        )

        return report

    async def _submit(
        self,
        pipeline: Pipeline,
        config: JobConfig,
        report: LifecycleReport,
    ) -> Job:
        job = await self._platform.submit(pipeline, config)
        report.jobs_submitted += 1

        return job

    async def _await_own_snapshot(self, job: Job):
        if not isinstance(job, CheckpointAware):
            await asyncio.sleep(max(self._pause, self._config.snapshot_interval))
            return

        status: JobStatus | None = None
        for poll in range(self._guard.max_polls):
            if await job.completed_snapshots() > 0:
                return

            status = await self._guard.raise_if_failed(job)

            if poll < self._guard.max_polls - 1:
                await asyncio.sleep(self._guard.poll_interval)

        raise JobStatusTimeoutError(
            job.name,
            "first snapshot",
            status.value if status else None,
            self._guard.bound,
            reason="the job took no snapshot of its own",
        )

    async def _abandon(
        self,
        job: Job,
        retained: JobStateSnapshot | None,
        report: LifecycleReport,
    ):
        try:
            await job.cancel()

        except Exception as err:
            await self._log(
                f"Cancelling job {job.name} failed ({err})",
                entry_type=SoakError,
            )

        if retained is None:
            return

        try:
            await retained.destroy()
            report.snapshots_destroyed += 1

        except Exception as err:
            await self._log(
                f"Destroying snapshot {retained.name} failed ({err})",
                entry_type=SoakError,
            )

    async def _log(
        self,
        message: str,
        entry_type: type[SoakInfo] | type[SoakError] = SoakInfo,
    ):
        await self._logger.log(
            entry_type(
                message=message,
                test=self._test_name,
                environment=self._environment,
            )
        )
