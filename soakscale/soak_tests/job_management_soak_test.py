import functools
from typing import Dict, List, Sequence

from soakscale.env import Env
from soakscale.logging import Logger
from soakscale.platform.connect import connect_platform
from soakscale.platform.models import (
    JobConfig,
    MapJournalPipeline,
    ProcessingGuarantee,
)
from soakscale.platform.protocols import StreamingPlatform
from soakscale.soak import (
    CountingProducer,
    DualEnvironmentOrchestrator,
    JobLifecycleDriver,
    LifecycleReport,
    Scenario,
    StatusPollGuard,
)

from .soak_test import SoakTest


class JobManagementSoakTest(SoakTest):
    """
    Feeds a journaled map with the counter workload while a journal job
    is cycled through suspend, resume, restart and snapshot upgrades. Each
    upgrade flips the parity the job accepts; the verifying sink fails the
    job on any lost, duplicated or wrong-parity value.
    """

    name = "job-management"

    def __init__(
        self,
        env: Env | None = None,
        logger: Logger | None = None,
        environments: Sequence[str] = ("dynamic",),
    ) -> None:
        super().__init__(env=env, logger=logger)

        self.environments = tuple(environments)
        self.platforms: Dict[str, StreamingPlatform] = {}
        self.producers: List[CountingProducer] = []

    async def init(self):
        urls = {
            "dynamic": self.config.platform_url,
            "stable": self.config.stable_platform_url,
        }

        for environment in self.environments:
            if (url := urls.get(environment)) is None:
                raise ValueError(f"Unknown environment {environment}")

            self.platforms[environment] = await connect_platform(url)

    async def test(self):
        # A cycle that starts just before the duration ends must still finish.
        deadline = self.config.deadline + JobLifecycleDriver.cycle_bound(
            self.config.lifecycle_pause,
            self.config.status_max_polls * self.config.status_poll_interval,
            self.config.snapshot_interval,
        )

        orchestrator = DualEnvironmentOrchestrator(
            deadline,
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
    ) -> LifecycleReport:
        map_name = f"{self.name}-{environment}"

        store = platform.get_map(
            map_name,
            journal_capacity=self.config.event_journal_capacity,
        )

        producer = CountingProducer.for_map(
            store,
            name=map_name,
            pace=self.config.producer_pace,
            retry_pause=self.config.producer_retry_pause,
            clear_threshold=self.config.map_clear_threshold,
            logger=self.logger,
        )
        self.producers.append(producer)
        producer.start()

        guard = StatusPollGuard(
            poll_interval=self.config.status_poll_interval,
            max_polls=self.config.status_max_polls,
            query_retries=self.config.status_query_retries,
            logger=self.logger,
        )

        driver = JobLifecycleDriver(
            platform,
            JobConfig(
                name=map_name,
                processing_guarantee=ProcessingGuarantee.EXACTLY_ONCE,
                snapshot_interval=self.config.snapshot_interval,
                auto_scaling=False,
            ),
            guard,
            logger=self.logger,
            pause=self.config.lifecycle_pause,
            test_name=self.name,
            environment=environment,
        )

        try:
            return await driver.run_lifecycle_cycle(
                functools.partial(self._pipeline, map_name),
                self.config.duration,
            )

        finally:
            await producer.stop()

    async def teardown(self, error: BaseException | None = None):
        for producer in self.producers:
            await producer.stop()

        self.producers.clear()

        for platform in self.platforms.values():
            await platform.shutdown()

        self.platforms.clear()

    def _pipeline(self, map_name: str, odds: bool):
        return MapJournalPipeline(
            map_name=map_name,
            odds=odds,
            start_from_oldest=True,
        )
