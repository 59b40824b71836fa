from typing import Dict

from .local_broker import LocalBroker
from .local_platform import LocalPlatform


class LocalRegistry:
    """
    Named in-process brokers and platforms, shared by every client that
    connects to the same ``local://`` name within a process. Closed
    instances are replaced on the next connect.
    """

    def __init__(self) -> None:
        self._brokers: Dict[str, LocalBroker] = {}
        self._platforms: Dict[str, LocalPlatform] = {}

    def broker(self, name: str):
        broker = self._brokers.get(name)
        if broker is None or broker.closed:
            broker = LocalBroker(name)
            self._brokers[name] = broker

        return broker

    def platform(
        self,
        name: str,
        broker_name: str = "broker",
        startup_delay: float = 0.0,
    ):
        platform = self._platforms.get(name)
        if platform is None or platform.closed:
            platform = LocalPlatform(
                name=name,
                broker=self.broker(broker_name),
                startup_delay=startup_delay,
            )
            self._platforms[name] = platform

        return platform

    def reset(self):
        self._brokers.clear()
        self._platforms.clear()


local_registry = LocalRegistry()
