import re

_UNITS = {
    "B": 1,
    "KB": 2**10,
    "MB": 2**20,
    "GB": 2**30,
    "TB": 2**40,
}

_FILE_SIZE = re.compile(
    r"(?P<amount>\d+(\.\d+)?)\s*(?P<unit>[KMGT]?B)?",
    flags=re.I,
)


class FileSizeParser:
    """Parses sizes like ``100MB`` or ``1.5 GB`` to bytes. A bare number is bytes."""

    def parse(self, file_size: str | int) -> int:
        if isinstance(file_size, int):
            return file_size

        match = _FILE_SIZE.fullmatch(file_size.strip())
        if match is None:
            raise ValueError(f"Invalid file size '{file_size}'")

        unit = (match.group("unit") or "B").upper()

        return int(float(match.group("amount")) * _UNITS[unit])
