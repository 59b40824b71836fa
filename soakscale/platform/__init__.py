from .errors import (
    EventJournalLostError as EventJournalLostError,
    JobFailedError as JobFailedError,
    JobStateError as JobStateError,
    PlatformUnavailableError as PlatformUnavailableError,
    SnapshotNotFoundError as SnapshotNotFoundError,
)
from .models import (
    JobConfig as JobConfig,
    JobStatus as JobStatus,
    MapJournalPipeline as MapJournalPipeline,
    Pipeline as Pipeline,
    ProcessingGuarantee as ProcessingGuarantee,
    QueueRelayPipeline as QueueRelayPipeline,
    TERMINAL_STATUSES as TERMINAL_STATUSES,
)
from .protocols import (
    CheckpointAware as CheckpointAware,
    Job as Job,
    JobStateSnapshot as JobStateSnapshot,
    KeyValueStore as KeyValueStore,
    MessageTransport as MessageTransport,
    StreamingPlatform as StreamingPlatform,
)
