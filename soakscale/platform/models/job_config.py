import msgspec

from .processing_guarantee import ProcessingGuarantee


class JobConfig(msgspec.Struct, frozen=True, kw_only=True):
    """
    Configuration a job is submitted with. Immutable once built; use the
    ``with_*`` builders to derive a changed copy.
    """

    name: str
    processing_guarantee: ProcessingGuarantee = ProcessingGuarantee.EXACTLY_ONCE
    snapshot_interval: float = 5.0  # seconds
    initial_snapshot_name: str | None = None
    auto_scaling: bool = False

    def with_initial_snapshot(self, snapshot_name: str | None) -> "JobConfig":
        return msgspec.structs.replace(
            self,
            initial_snapshot_name=snapshot_name,
        )

    def with_name(self, name: str) -> "JobConfig":
        return msgspec.structs.replace(
            self,
            name=name,
        )
