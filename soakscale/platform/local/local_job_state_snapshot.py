from __future__ import annotations

from typing import TYPE_CHECKING

import msgspec

from soakscale.soak.verification import ParityState

if TYPE_CHECKING:
    from .local_platform import LocalPlatform


class JournalProgress(msgspec.Struct, frozen=True, kw_only=True):
    offset: int
    verifier: ParityState


class LocalJobStateSnapshot:
    def __init__(
        self,
        name: str,
        state: JournalProgress | None,
        platform: LocalPlatform,
    ) -> None:
        self._name = name
        self.state = state
        self._platform = platform
        self._destroyed = False

    @property
    def name(self):
        return self._name

    @property
    def destroyed(self):
        return self._destroyed

    async def destroy(self):
        if self._destroyed:
            return

        self._destroyed = True
        self._platform.remove_snapshot(self)
