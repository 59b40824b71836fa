from __future__ import annotations
import os
from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr
from typing import Callable, Dict, Literal, Union

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    SOAK_TEST_NAME: StrictStr = "relay"
    SOAK_DURATION: StrictStr = "30m"
    SOAK_DEADLINE_FACTOR: StrictFloat = 1.05

    # Platform and transport endpoints
    SOAK_PLATFORM_URL: StrictStr = "local://dynamic"
    SOAK_STABLE_PLATFORM_URL: StrictStr = "local://stable"
    SOAK_BROKER_URL: StrictStr = "local://broker"

    # Job lifecycle
    SOAK_SNAPSHOT_INTERVAL: StrictStr = "5s"
    SOAK_LIFECYCLE_PAUSE: StrictStr = "1m"
    SOAK_MONITOR_INTERVAL: StrictStr = "1m"
    SOAK_STATUS_POLL_INTERVAL: StrictStr = "1s"
    SOAK_STATUS_MAX_POLLS: StrictInt = 120
    SOAK_STATUS_QUERY_RETRIES: StrictInt = 30

    # Workload and reconciliation
    SOAK_RECONCILE_MAX_RETRIES: StrictInt = 100
    SOAK_RECONCILE_RETRY_DELAY: StrictStr = "1s"
    SOAK_PRODUCER_PACE: StrictStr = "5ms"
    SOAK_PRODUCER_RETRY_PAUSE: StrictStr = "1s"
    SOAK_MAP_CLEAR_THRESHOLD: StrictInt = 5000
    SOAK_EVENT_JOURNAL_CAPACITY: StrictInt = 1_500_000

    # Logging
    SOAK_LOG_LEVEL: StrictStr = "info"
    SOAK_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    SOAK_LOGS_DIRECTORY: StrictStr = os.path.join(os.getcwd(), "logs")
    SOAK_LOG_MAX_SIZE: StrictStr = "100MB"
    SOAK_LOG_MAX_AGE: StrictStr = "1d"

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "SOAK_TEST_NAME": str,
            "SOAK_DURATION": str,
            "SOAK_DEADLINE_FACTOR": float,
            "SOAK_PLATFORM_URL": str,
            "SOAK_STABLE_PLATFORM_URL": str,
            "SOAK_BROKER_URL": str,
            "SOAK_SNAPSHOT_INTERVAL": str,
            "SOAK_LIFECYCLE_PAUSE": str,
            "SOAK_MONITOR_INTERVAL": str,
            "SOAK_STATUS_POLL_INTERVAL": str,
            "SOAK_STATUS_MAX_POLLS": int,
            "SOAK_STATUS_QUERY_RETRIES": int,
            "SOAK_RECONCILE_MAX_RETRIES": int,
            "SOAK_RECONCILE_RETRY_DELAY": str,
            "SOAK_PRODUCER_PACE": str,
            "SOAK_PRODUCER_RETRY_PAUSE": str,
            "SOAK_MAP_CLEAR_THRESHOLD": int,
            "SOAK_EVENT_JOURNAL_CAPACITY": int,
            "SOAK_LOG_LEVEL": str,
            "SOAK_LOG_OUTPUT": str,
            "SOAK_LOGS_DIRECTORY": str,
            "SOAK_LOG_MAX_SIZE": str,
            "SOAK_LOG_MAX_AGE": str,
        }

    def get_retention_policy(self) -> dict:
        return {
            "max_size": self.SOAK_LOG_MAX_SIZE,
            "max_age": self.SOAK_LOG_MAX_AGE,
        }
