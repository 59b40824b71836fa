"""
Resolve platform and transport URLs to clients.

``local://<name>`` resolves to a named in-process platform or broker. A
platform URL may select its broker and a startup delay through the query
string, e.g. ``local://dynamic?broker=jms&startup_delay=0.5``.
Other schemes are added with ``register_platform_connector`` and
``register_transport_connector``.
"""

from typing import Awaitable, Callable, Dict
from urllib.parse import SplitResult, parse_qs, urlsplit

from .local import local_registry
from .protocols import MessageTransport, StreamingPlatform

PlatformConnector = Callable[[SplitResult], Awaitable[StreamingPlatform]]
TransportConnector = Callable[[SplitResult], Awaitable[MessageTransport]]


_platform_connectors: Dict[str, PlatformConnector] = {}
_transport_connectors: Dict[str, TransportConnector] = {}


def register_platform_connector(
    scheme: str,
    connector: PlatformConnector,
):
    _platform_connectors[scheme] = connector


def register_transport_connector(
    scheme: str,
    connector: TransportConnector,
):
    _transport_connectors[scheme] = connector


def _parse(url: str):
    parsed = urlsplit(url)
    if not parsed.scheme:
        raise ValueError(f"URL {url} has no scheme")

    return parsed


async def connect_platform(url: str) -> StreamingPlatform:
    parsed = _parse(url)

    if (connector := _platform_connectors.get(parsed.scheme)) is None:
        raise ValueError(f"No platform connector registered for scheme {parsed.scheme}")

    return await connector(parsed)


async def connect_transport(url: str) -> MessageTransport:
    parsed = _parse(url)

    if (connector := _transport_connectors.get(parsed.scheme)) is None:
        raise ValueError(f"No transport connector registered for scheme {parsed.scheme}")

    return await connector(parsed)


async def _connect_local_platform(parsed: SplitResult):
    query = parse_qs(parsed.query)

    return local_registry.platform(
        parsed.netloc or "local",
        broker_name=query.get("broker", ["broker"])[0],
        startup_delay=float(query.get("startup_delay", ["0"])[0]),
    )


async def _connect_local_transport(parsed: SplitResult):
    return local_registry.broker(parsed.netloc or "broker")


register_platform_connector("local", _connect_local_platform)
register_transport_connector("local", _connect_local_transport)
