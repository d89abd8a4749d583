"""Public package surface for the twitch_data client."""

from .batching import BatchLoader, WaiterRegistry
from .client import TwitchData
from .errors import (
    ApplicationError,
    ClientClosedError,
    InvalidKeyError,
    RemoteError,
    TransportError,
    TwitchDataError,
)
from .transport import DEFAULT_GQL_URL, GqlTransport

__all__ = [
    "DEFAULT_GQL_URL",
    "ApplicationError",
    "BatchLoader",
    "ClientClosedError",
    "GqlTransport",
    "InvalidKeyError",
    "RemoteError",
    "TransportError",
    "TwitchData",
    "TwitchDataError",
    "WaiterRegistry",
]
