import msgspec


class QueueRelayPipeline(msgspec.Struct, frozen=True, kw_only=True):
    """Moves every item from one queue into another."""

    source_queue: str
    sink_queue: str


class MapJournalPipeline(msgspec.Struct, frozen=True, kw_only=True):
    """
    Reads put events from a map's event journal, keeps the values with
    the selected parity and hands them to a parity verifying sink.
    """

    map_name: str
    odds: bool
    sink_name: str = "verification"
    start_from_oldest: bool = True


Pipeline = QueueRelayPipeline | MapJournalPipeline
