from enum import Enum


class JobStatus(str, Enum):
    """Status of a job as reported by the streaming platform."""

    NOT_RUNNING = "not_running"  # Submitted, not yet scheduled
    STARTING = "starting"  # Being scheduled onto members
    RUNNING = "running"  # Active execution
    SUSPENDED = "suspended"  # Paused, state held in the last snapshot
    SUSPENDED_EXPORTING_SNAPSHOT = "suspended_exporting_snapshot"
    COMPLETING = "completing"  # Cancelling or draining
    FAILED = "failed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {
        JobStatus.FAILED,
        JobStatus.COMPLETED,
        JobStatus.CANCELLED,
    }
)
