from .lifecycle_report import LifecycleReport as LifecycleReport
from .scenario_outcome import ScenarioOutcome as ScenarioOutcome
from .scenario_result import ScenarioResult as ScenarioResult
