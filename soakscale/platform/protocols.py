"""
Protocols describing the streaming platform and message transport the
soak harness drives.

The harness depends on these protocols rather than on a concrete client,
so the same soak tests run against a real cluster or against the
in-process implementation in ``soakscale.platform.local``.
"""

from typing import Any, AsyncIterator, Protocol, runtime_checkable

from .models import JobConfig, JobStatus, Pipeline


@runtime_checkable
class JobStateSnapshot(Protocol):
    """A named, exported job state usable to initialize a successor job."""

    @property
    def name(self) -> str: ...

    async def destroy(self) -> None:
        """Delete the snapshot. Destroying twice is a no-op."""
        ...


@runtime_checkable
class Job(Protocol):
    """
    Handle to a job running on the platform.

    Status changing calls return once the request is accepted; the job
    reaches the requested status asynchronously.
    """

    # === Identity ===

    @property
    def job_id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def config(self) -> JobConfig: ...

    # === Status ===

    async def status(self) -> JobStatus:
        """Query the current status. May raise a transient ConnectionError."""
        ...

    async def join(self) -> None:
        """Block until the job is terminal. Raises JobFailedError on FAILED."""
        ...

    # === Lifecycle ===

    async def suspend(self) -> None: ...

    async def resume(self) -> None: ...

    async def restart(self) -> None: ...

    async def cancel(self) -> None:
        """Cancel the job. A no-op when the job is already terminal."""
        ...

    async def cancel_and_export_snapshot(self, name: str) -> JobStateSnapshot:
        """Atomically terminate the job and export its state under ``name``."""
        ...


@runtime_checkable
class CheckpointAware(Protocol):
    """Optional capability of a Job exposing its automatic snapshot count."""

    async def completed_snapshots(self) -> int:
        """Number of automatic snapshots taken since the job started."""
        ...


@runtime_checkable
class StreamingPlatform(Protocol):
    async def submit(
        self,
        pipeline: Pipeline,
        config: JobConfig,
    ) -> Job: ...

    def get_map(
        self,
        name: str,
        journal_capacity: int | None = None,
    ) -> "KeyValueStore":
        """Get (creating on first use) a map with an event journal."""
        ...

    async def shutdown(self) -> None:
        """Release the client handle. Safe to call more than once."""
        ...


@runtime_checkable
class MessageTransport(Protocol):
    async def publish(self, queue_name: str, value: Any) -> None:
        """Publish one value. Raises ConnectionError on transient failure."""
        ...

    def consume(self, queue_name: str) -> AsyncIterator[Any]:
        """Yield values from the named queue as they arrive."""
        ...

    async def close(self) -> None: ...


@runtime_checkable
class KeyValueStore(Protocol):
    async def set(self, key: Any, value: Any) -> None: ...

    async def clear(self) -> None: ...
