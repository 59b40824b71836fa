from .errors import (
    HarnessError as HarnessError,
    JobStatusTimeoutError as JobStatusTimeoutError,
    ReconciliationMismatchError as ReconciliationMismatchError,
    ScenarioTimeoutError as ScenarioTimeoutError,
    VerificationError as VerificationError,
)
from .verification import (
    ParityState as ParityState,
    ParityVerifier as ParityVerifier,
)
from .results import (
    LifecycleReport as LifecycleReport,
    ScenarioOutcome as ScenarioOutcome,
    ScenarioResult as ScenarioResult,
)
from .counting_consumer import CountingConsumer as CountingConsumer
from .counting_producer import CountingProducer as CountingProducer
from .lifecycle_driver import JobLifecycleDriver as JobLifecycleDriver
from .orchestrator import (
    DualEnvironmentOrchestrator as DualEnvironmentOrchestrator,
    Scenario as Scenario,
)
from .reconciliation import ReconciliationChecker as ReconciliationChecker
from .soak_config import (
    SoakConfig as SoakConfig,
    create_soak_config_from_env as create_soak_config_from_env,
)
from .status_poll_guard import StatusPollGuard as StatusPollGuard
