from enum import Enum


class ProcessingGuarantee(str, Enum):
    """Delivery guarantee a job is submitted with."""

    NONE = "none"  # Best effort
    AT_LEAST_ONCE = "at_least_once"
    EXACTLY_ONCE = "exactly_once"
