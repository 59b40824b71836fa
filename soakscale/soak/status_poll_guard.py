"""
Status polling that tells an unreachable platform apart from a job that
will never reach the awaited status.

A status query failing with ConnectionError, TimeoutError or OSError is
retried at a fixed interval up to ``query_retries`` attempts. A FAILED
status stops polling and surfaces the job's own failure cause through
``join()``. Polling for a target gives up after
``max_polls * poll_interval`` seconds.
"""

import asyncio

from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import JobStatusDebug
from soakscale.platform.errors import JobFailedError
from soakscale.platform.models import JobStatus, TERMINAL_STATUSES
from soakscale.platform.protocols import Job
from soakscale.reliability import RetryConfig, RetryExecutor

from .errors import JobStatusTimeoutError


class StatusPollGuard:
    def __init__(
        self,
        poll_interval: float = 1.0,
        max_polls: int = 120,
        query_retries: int = 30,
        logger: Logger | None = None,
    ) -> None:
        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")

        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._logger = logger or Logger()

        self._retry_config = RetryConfig.fixed_interval(
            max_attempts=query_retries,
            interval=poll_interval,
        )

    @property
    def poll_interval(self):
        return self._poll_interval

    @property
    def max_polls(self):
        return self._max_polls

    @property
    def bound(self):
        return self._max_polls * self._poll_interval

    async def get_status(self, job: Job) -> JobStatus:
        async def log_retry(error: Exception, attempt: int):
            await self._logger.log(
                JobStatusDebug(
                    message=f"Status query for job {job.name} failed ({error}), retry {attempt}",
                    job_name=job.name,
                    job_id=str(job.job_id),
                    status="unknown",
                )
            )

        executor = RetryExecutor(
            self._retry_config,
            on_retry=log_retry,
        )

        return await executor.execute(
            job.status,
            operation_name=f"status query for job {job.name}",
        )

    async def await_status(
        self,
        job: Job,
        target: JobStatus,
    ) -> JobStatus:
        last_status: JobStatus | None = None

        for poll in range(self._max_polls):
            last_status = await self.get_status(job)

            await self._logger.log(
                JobStatusDebug(
                    message=f"Job {job.name} is {last_status.value}, awaiting {target.value}",
                    job_name=job.name,
                    job_id=str(job.job_id),
                    status=last_status.value,
                )
            )

            if last_status == target:
                return last_status

            if last_status == JobStatus.FAILED:
                await self._join_failed(job)

            if last_status in TERMINAL_STATUSES:
                raise JobStatusTimeoutError(
                    job.name,
                    target.value,
                    last_status.value,
                    self.bound,
                    reason="job is terminal",
                )

            if poll < self._max_polls - 1:
                await asyncio.sleep(self._poll_interval)

        raise JobStatusTimeoutError(
            job.name,
            target.value,
            last_status.value if last_status else None,
            self.bound,
        )

    async def raise_if_failed(self, job: Job) -> JobStatus:
        status = await self.get_status(job)

        if status == JobStatus.FAILED:
            await self._join_failed(job)

        return status

    async def _join_failed(self, job: Job):
        await job.join()

        # join() on a FAILED job is expected to raise the cause itself.
        raise JobFailedError(job.name)
