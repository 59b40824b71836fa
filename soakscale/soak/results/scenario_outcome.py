from dataclasses import dataclass
from typing import Any

from .scenario_result import ScenarioResult


@dataclass(slots=True)
class ScenarioOutcome:
    environment: str
    result: ScenarioResult
    duration_seconds: float
    error: BaseException | None = None
    report: Any = None

    @property
    def passed(self):
        return self.result == ScenarioResult.PASSED
