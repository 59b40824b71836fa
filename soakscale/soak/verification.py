from collections import deque

import msgspec

from .errors import VerificationError


class ParityState(msgspec.Struct, frozen=True, kw_only=True):
    odds: bool
    last: int | None = None
    verified: int = 0


class ParityVerifier:
    """
    Sink verifying a filtered counter stream.

    Every accepted value must have the configured parity and, once a value
    of the same parity has been seen, must follow it by exactly 2. After a
    restore with the opposite parity (an upgraded job picking up another
    job's snapshot) the first value only has to be greater than the last
    one seen, since the journal position may already sit past the first
    value of the new parity.
    """

    def __init__(
        self,
        odds: bool,
        observed_limit: int = 10_000,
    ):
        self.odds = odds
        self.observed: deque[int] = deque(maxlen=observed_limit)
        self._last: int | None = None
        self._verified = 0

    @property
    def last(self):
        return self._last

    @property
    def verified(self):
        return self._verified

    def accepts(self, value: int):
        return (value % 2 == 1) == self.odds

    def accept(self, value: int):
        if not self.accepts(value):
            raise VerificationError(
                value,
                "an odd value" if self.odds else "an even value",
            )

        if self._last is not None:
            if self.accepts(self._last) and value != self._last + 2:
                raise VerificationError(value, str(self._last + 2))

            elif value <= self._last:
                raise VerificationError(value, f"a value above {self._last}")

        self._last = value
        self._verified += 1
        self.observed.append(value)

    def export_state(self):
        return ParityState(
            odds=self.odds,
            last=self._last,
            verified=self._verified,
        )

    @classmethod
    def restore(
        cls,
        state: ParityState,
        odds: bool | None = None,
        observed_limit: int = 10_000,
    ):
        verifier = cls(
            state.odds if odds is None else odds,
            observed_limit=observed_limit,
        )
        verifier._last = state.last
        verifier._verified = state.verified

        return verifier
