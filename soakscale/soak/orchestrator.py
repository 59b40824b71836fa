import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Collection, List, Sequence

from soakscale.logging import Logger
from soakscale.logging.soak_logging_models import SoakError, SoakInfo, SoakWarning

from .errors import ScenarioTimeoutError
from .results import ScenarioOutcome, ScenarioResult


@dataclass(slots=True)
class Scenario:
    environment: str
    procedure: Callable[[], Awaitable[Any]]


class DualEnvironmentOrchestrator:
    """
    Runs independent scenarios concurrently, one task each, and keeps every
    scenario's failure attributable to its environment.

    Scenarios still running at the deadline are cancelled, awaited and
    recorded as timed out. ``run_all`` logs every failure and then raises the first
    one in submission order.
    """

    def __init__(
        self,
        deadline: float | None,
        logger: Logger | None = None,
        test_name: str = "soak",
        cancel_grace: float = 10.0,
    ) -> None:
        self._deadline = deadline
        self._logger = logger or Logger()
        self._test_name = test_name
        self._cancel_grace = cancel_grace

    async def run_all(
        self,
        scenarios: Sequence[Scenario],
    ) -> List[ScenarioOutcome]:
        outcomes = await self.run_all_outcomes(scenarios)

        for outcome in outcomes:
            if outcome.error is not None:
                raise outcome.error

        return outcomes

    async def run_all_outcomes(
        self,
        scenarios: Sequence[Scenario],
    ) -> List[ScenarioOutcome]:
        environments = [scenario.environment for scenario in scenarios]
        if len(set(environments)) != len(environments):
            raise ValueError(f"Scenario environments must be unique, got {environments}")

        start = time.monotonic()
        tasks = [
            asyncio.create_task(
                self._run_scenario(scenario),
                name=scenario.environment,
            )
            for scenario in scenarios
        ]

        try:
            if tasks:
                _, pending = await asyncio.wait(
                    tasks,
                    timeout=self._deadline,
                )

            else:
                pending = set()

        except asyncio.CancelledError:
            await self._drain(tasks)
            raise

        timed_out = set(pending)
        if pending:
            await self._drain(pending)

        outcomes: List[ScenarioOutcome] = []
        for scenario, task in zip(scenarios, tasks):
            if task in timed_out:
                await self._log_late_result(task)
                outcomes.append(
                    ScenarioOutcome(
                        environment=scenario.environment,
                        result=ScenarioResult.TIMED_OUT,
                        duration_seconds=time.monotonic() - start,
                        error=ScenarioTimeoutError(
                            scenario.environment,
                            self._deadline,
                        ),
                    )
                )

            else:
                outcomes.append(task.result())

        for outcome in outcomes:
            await self._log_outcome(outcome)

        return outcomes

    async def _drain(self, tasks: Collection[asyncio.Task]):
        # Every task is awaited; one that ignores cancellation is cancelled
        # again after each grace period until it finishes.
        pending = set(tasks)
        while pending:
            for task in pending:
                task.cancel()

            _, pending = await asyncio.wait(
                pending,
                timeout=self._cancel_grace,
            )

            for task in pending:
                await self._logger.log(
                    SoakWarning(
                        message=(
                            f"Scenario {task.get_name()} still running "
                            f"{self._cancel_grace:.2f}s after cancellation"
                        ),
                        test=self._test_name,
                        environment=task.get_name(),
                    )
                )

    async def _log_late_result(self, task: asyncio.Task):
        if task.cancelled():
            return

        if (error := task.exception()) is None:
            error = task.result().error

        if error is None:
            return

        await self._logger.log(
            SoakError(
                message=(
                    f"Scenario {task.get_name()} failed after its deadline: "
                    f"{type(error).__name__}: {error}"
                ),
                test=self._test_name,
                environment=task.get_name(),
            )
        )

    async def _run_scenario(self, scenario: Scenario) -> ScenarioOutcome:
        start = time.monotonic()

        try:
            report = await scenario.procedure()

        except Exception as err:
            return ScenarioOutcome(
                environment=scenario.environment,
                result=ScenarioResult.FAILED,
                duration_seconds=time.monotonic() - start,
                error=err,
            )

        return ScenarioOutcome(
            environment=scenario.environment,
            result=ScenarioResult.PASSED,
            duration_seconds=time.monotonic() - start,
            report=report,
        )

    async def _log_outcome(self, outcome: ScenarioOutcome):
        if outcome.error is None:
            await self._logger.log(
                SoakInfo(
                    message=f"Scenario {outcome.environment} passed in {outcome.duration_seconds:.2f}s",
                    test=self._test_name,
                    environment=outcome.environment,
                )
            )
            return

        await self._logger.log(
            SoakError(
                message=(
                    f"Scenario {outcome.environment} {outcome.result.value.lower()} "
                    f"after {outcome.duration_seconds:.2f}s: "
                    f"{type(outcome.error).__name__}: {outcome.error}"
                ),
                test=self._test_name,
                environment=outcome.environment,
            )
        )
