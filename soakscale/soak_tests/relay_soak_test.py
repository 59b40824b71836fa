import asyncio
import functools
from dataclasses import dataclass
from typing import Dict

from soakscale.env import Env
from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import SoakError, SoakInfo
from soakscale.platform.connect import connect_platform, connect_transport
from soakscale.platform.models import (
    JobConfig,
    JobStatus,
    ProcessingGuarantee,
    QueueRelayPipeline,
)
from soakscale.platform.protocols import (
    Job,
    MessageTransport,
    StreamingPlatform,
)
from soakscale.soak import (
    CountingConsumer,
    CountingProducer,
    DualEnvironmentOrchestrator,
    ReconciliationChecker,
    Scenario,
    StatusPollGuard,
)

from .soak_test import SoakTest


@dataclass(slots=True)
class RelayReport:
    environment: str
    published: int
    consumed: int


class RelaySoakTest(SoakTest):
    """
    Relays the counter workload through two chained exactly-once jobs
    (source -> middle -> sink) on a fixed-size and on an elastic cluster
    at the same time, then checks every published value reached the sink
    exactly once.
    """

    name = "relay"

    def __init__(
        self,
        env: Env | None = None,
        logger: Logger | None = None,
    ) -> None:
        super().__init__(env=env, logger=logger)

        self.transport: MessageTransport | None = None
        self.platforms: Dict[str, StreamingPlatform] = {}

    async def init(self):
        self.transport = await connect_transport(self.config.broker_url)

        self.platforms["stable"] = await connect_platform(self.config.stable_platform_url)
        self.platforms["dynamic"] = await connect_platform(self.config.platform_url)

    async def test(self):
        orchestrator = DualEnvironmentOrchestrator(
            self.config.deadline,
            logger=self.logger,
            test_name=self.name,
        )

        return await orchestrator.run_all(
            [
                Scenario(
                    environment,
                    functools.partial(
                        self.run_environment,
                        platform,
                        environment,
                    ),
                )
                for environment, platform in self.platforms.items()
            ]
        )

    async def run_environment(
        self,
        platform: StreamingPlatform,
        environment: str,
    ) -> RelayReport:
        suffix = f"-{environment}"
        source = f"source{suffix}"
        middle = f"middle{suffix}"
        sink = f"sink{suffix}"

        guard = StatusPollGuard(
            poll_interval=self.config.status_poll_interval,
            max_polls=self.config.status_max_polls,
            query_retries=self.config.status_query_retries,
            logger=self.logger,
        )
        checker = ReconciliationChecker(
            max_retries=self.config.reconcile_max_retries,
            retry_delay=self.config.reconcile_retry_delay,
            logger=self.logger,
        )

        producer = CountingProducer.for_queue(
            self.transport,
            source,
            pace=self.config.producer_pace,
            retry_pause=self.config.producer_retry_pause,
            logger=self.logger,
        )
        consumer = CountingConsumer(self.transport, sink)

        jobs: list[Job] = []

        try:
            jobs.append(
                await platform.submit(
                    QueueRelayPipeline(source_queue=source, sink_queue=middle),
                    self._job_config(f"relay-source-middle{suffix}"),
                )
            )
            jobs.append(
                await platform.submit(
                    QueueRelayPipeline(source_queue=middle, sink_queue=sink),
                    self._job_config(f"relay-middle-sink{suffix}"),
                )
            )

            for job in jobs:
                await guard.await_status(job, JobStatus.RUNNING)

            producer.start()
            consumer.start()

            await self._log(environment, f"Relay jobs running, monitoring for {self.config.duration:.2f}s")
            await self._monitor(guard, jobs)

            published = await producer.stop()
            await checker.assert_eventual_equality(published, consumer.get_count)
            consumed = await consumer.stop()

            await self._log(environment, f"Published {published}, consumed {consumed}")

        except (Exception, asyncio.CancelledError) as err:
            await self._log(environment, f"Relay failed ({err}), cleaning up", entry_type=SoakError)
            await self._abandon(environment, producer, consumer, jobs)
            raise

        for job in reversed(jobs):
            await job.cancel()

        return RelayReport(
            environment=environment,
            published=published,
            consumed=consumed,
        )

    async def teardown(self, error: BaseException | None = None):
        for platform in self.platforms.values():
            await platform.shutdown()

        self.platforms.clear()

        if self.transport is not None:
            await self.transport.close()
            self.transport = None

    async def _monitor(self, guard: StatusPollGuard, jobs: list[Job]):
        loop = asyncio.get_running_loop()
        end = loop.time() + self.config.duration

        while (remaining := end - loop.time()) > 0:
            for job in jobs:
                await guard.raise_if_failed(job)

            await asyncio.sleep(min(self.config.monitor_interval, remaining))

    async def _abandon(
        self,
        environment: str,
        producer: CountingProducer,
        consumer: CountingConsumer,
        jobs: list[Job],
    ):
        # Stop measuring before touching the jobs.
        for workload in (producer, consumer):
            try:
                await workload.stop()

            except Exception as err:
                await self._log(environment, f"Stopping {type(workload).__name__} failed ({err})", entry_type=SoakError)

        for job in reversed(jobs):
            try:
                await job.cancel()

            except Exception as err:
                await self._log(environment, f"Cancelling job {job.name} failed ({err})", entry_type=SoakError)

    def _job_config(self, name: str):
        return JobConfig(
            name=name,
            processing_guarantee=ProcessingGuarantee.EXACTLY_ONCE,
            snapshot_interval=self.config.snapshot_interval,
        )

    async def _log(
        self,
        environment: str,
        message: str,
        entry_type: type[SoakInfo] | type[SoakError] = SoakInfo,
    ):
        await self.logger.log(
            entry_type(
                message=message,
                test=self.name,
                environment=environment,
            )
        )
