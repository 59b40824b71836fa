class PlatformUnavailableError(ConnectionError):
    """The platform could not be reached. Callers may retry."""


class JobFailedError(Exception):
    """A job reached the FAILED status."""

    def __init__(
        self,
        job_name: str,
        cause: BaseException | str | None = None,
    ):
        self.job_name = job_name
        self.cause = cause

        message = f"Job {job_name} failed"
        if cause is not None:
            message = f"{message}: {cause}"

        super().__init__(message)


class SnapshotNotFoundError(LookupError):
    def __init__(self, snapshot_name: str):
        self.snapshot_name = snapshot_name
        super().__init__(f"No exported snapshot named {snapshot_name}")


class JobStateError(RuntimeError):
    """A lifecycle operation was requested in a status that does not allow it."""

    def __init__(self, job_name: str, operation: str, status: str):
        self.job_name = job_name
        self.operation = operation
        self.status = status
        super().__init__(
            f"Cannot {operation} job {job_name} while it is {status}"
        )


class EventJournalLostError(LookupError):
    """A journal reader fell behind the oldest event still retained."""

    def __init__(self, map_name: str, offset: int, oldest_offset: int):
        self.map_name = map_name
        self.offset = offset
        self.oldest_offset = oldest_offset
        super().__init__(
            f"Event journal of map {map_name} no longer holds offset {offset} "
            f"(oldest retained is {oldest_offset})"
        )
