from .local_broker import (
    JournalEvent as JournalEvent,
    LocalBroker as LocalBroker,
    LocalMap as LocalMap,
    LocalQueue as LocalQueue,
)
from .local_job import LocalJob as LocalJob
from .local_job_state_snapshot import (
    JournalProgress as JournalProgress,
    LocalJobStateSnapshot as LocalJobStateSnapshot,
)
from .local_platform import (
    LocalPlatform as LocalPlatform,
    PlatformEvent as PlatformEvent,
)
from .local_registry import (
    LocalRegistry as LocalRegistry,
    local_registry as local_registry,
)
