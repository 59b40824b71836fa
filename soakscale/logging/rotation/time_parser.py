import re
from datetime import timedelta


class TimeParser:
    def __init__(self) -> None:
        self._units = {
            "ms": "milliseconds",
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
            "d": "days",
            "w": "weeks",
        }

    def parse(self, time_amount: str | int | float) -> float:
        if isinstance(time_amount, (int, float)):
            return float(time_amount)

        matches = list(
            re.finditer(
                r"(?P<val>\d+(\.\d+)?)(?P<unit>ms|[smhdw]?)",
                time_amount.strip(),
                flags=re.I,
            )
        )

        if len(matches) < 1:
            raise ValueError(f"Invalid time amount '{time_amount}'")

        parsed: dict[str, float] = {}
        for match in matches:
            unit = self._units.get(
                match.group("unit").lower(),
                "seconds",
            )
            parsed[unit] = parsed.get(unit, 0.0) + float(match.group("val"))

        return float(
            timedelta(**parsed).total_seconds()
        )
