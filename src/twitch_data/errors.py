"""Exception types raised by the twitch_data client."""

from __future__ import annotations


class TwitchDataError(Exception):
    """Base class for all client errors."""


class InvalidKeyError(TwitchDataError, ValueError):
    """Raised when a lookup is given neither (or both) of id and login."""


class TransportError(TwitchDataError):
    """Network, HTTP or decoding failure while talking to the endpoint."""


class RemoteError(TwitchDataError):
    """The endpoint answered with GraphQL errors and no usable data."""

    def __init__(self, message: str, errors: list | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ApplicationError(TwitchDataError):
    """A mutation succeeded at the transport level but reported an error code."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


class ClientClosedError(TwitchDataError):
    """The client was closed while the request was still pending."""


__all__ = [
    "ApplicationError",
    "ClientClosedError",
    "InvalidKeyError",
    "RemoteError",
    "TransportError",
    "TwitchDataError",
]
