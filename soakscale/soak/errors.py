"""
Failures raised by the soak harness itself.

Platform side failures (an unreachable cluster, a FAILED job) live in
``soakscale.platform.errors``; these are the verdicts the harness reaches
about what the platform did.
"""


class HarnessError(Exception):
    """Base class for soak harness failures."""


class JobStatusTimeoutError(HarnessError):
    """A job never reached the awaited status within the poll bound."""

    def __init__(
        self,
        job_name: str,
        target: str,
        last_status: str | None,
        bound: float,
        reason: str | None = None,
    ):
        self.job_name = job_name
        self.target = target
        self.last_status = last_status
        self.bound = bound
        self.reason = reason

        message = (
            f"Job {job_name} did not reach {target} within {bound:.2f}s "
            f"(last status: {last_status})"
        )
        if reason:
            message = f"{message}: {reason}"

        super().__init__(message)


class ReconciliationMismatchError(HarnessError):
    def __init__(self, expected: int, actual: int, attempts: int):
        self.expected = expected
        self.actual = actual
        self.attempts = attempts
        super().__init__(
            f"Count mismatch after {attempts} attempts: expected {expected}, actual {actual}"
        )


class ScenarioTimeoutError(HarnessError):
    """A scenario was still running when the orchestrator deadline passed."""

    def __init__(self, environment: str, deadline: float):
        self.environment = environment
        self.deadline = deadline
        super().__init__(
            f"Scenario {environment} did not finish within {deadline:.2f}s"
        )


class VerificationError(HarnessError):
    """The verification sink observed a value out of order or of the wrong parity."""

    def __init__(self, value: int, expected: str):
        self.value = value
        self.expected = expected
        super().__init__(f"Unexpected value {value}, expected {expected}")
