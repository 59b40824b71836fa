from .job_config import JobConfig as JobConfig
from .job_status import (
    JobStatus as JobStatus,
    TERMINAL_STATUSES as TERMINAL_STATUSES,
)
from .pipelines import (
    MapJournalPipeline as MapJournalPipeline,
    Pipeline as Pipeline,
    QueueRelayPipeline as QueueRelayPipeline,
)
from .processing_guarantee import ProcessingGuarantee as ProcessingGuarantee
