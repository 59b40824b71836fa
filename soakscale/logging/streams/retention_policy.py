from typing import Dict, Literal

from soakscale.logging.rotation import (
    FileSizeParser,
    TimeParser,
)

RetentionPolicyConfig = Dict[
    Literal[
        "max_age",
        "max_size"
    ],
    str
]


class RetentionPolicy:
    """
    When a log file is due for archiving: once it is older than ``max_age``
    or larger than ``max_size``. Either limit may be left out.
    """

    def __init__(
        self,
        max_age: float | None = None,
        max_size: int | None = None,
    ) -> None:
        self.max_age = max_age
        self.max_size = max_size

    @classmethod
    def from_config(cls, config: RetentionPolicyConfig):
        max_age = config.get("max_age")
        max_size = config.get("max_size")

        return cls(
            max_age=TimeParser().parse(max_age) if max_age else None,
            max_size=FileSizeParser().parse(max_size) if max_size else None,
        )

    def should_rotate(
        self,
        file_age: float,
        file_size: int,
    ) -> bool:
        if self.max_age is not None and file_age >= self.max_age:
            return True

        return self.max_size is not None and file_size >= self.max_size
