"""Core TwitchData client with a raw-query escape hatch."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .batching import DEFAULT_BATCH_DELAY, DEFAULT_BATCH_SIZE
from .resources.badges import Badges
from .resources.categories import Categories
from .resources.polls import Polls
from .resources.streams import Streams
from .resources.tags import Tags
from .resources.users import Users
from .transport import GqlTransport, Transport

DEFAULT_LANGUAGE_DELAY = 0.016


class TwitchData:
    """Resource-grouped client for the Twitch GraphQL endpoint.

    One instance owns the batch loaders and the tag cache for its lifetime.
    Create it once per session and close it with :meth:`aclose` (or use it as
    an async context manager).
    """

    users: Users
    streams: Streams
    tags: Tags
    categories: Categories
    polls: Polls
    badges: Badges

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        client_id: Optional[str] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        transport: Optional[Transport] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        language_delay: float = DEFAULT_LANGUAGE_DELAY,
    ) -> None:
        """Create a client bound to a GraphQL endpoint.

        Parameters
        ----------
        url
            GraphQL endpoint URL, used when no ``transport`` is given.
        client_id
            ``Client-ID`` header value, used when no ``transport`` is given.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        transport
            Object with ``execute`` and ``execute_mutation`` coroutines. When
            omitted a :class:`GqlTransport` is built from the other arguments.
        batch_size
            Maximum number of keys per batched lookup.
        batch_delay
            Seconds to wait for more lookups before sending a batch.
        language_delay
            Seconds to wait after the last tag arrives before refreshing the
            languages passed to a ``languages_from_tags`` callback.
        """
        self.default_timeout = default_timeout
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.language_delay = language_delay
        self._logger = logging.getLogger(__name__)
        self.transport: Transport = transport or GqlTransport(
            url=url,
            client_id=client_id,
            default_timeout=default_timeout,
            session=session,
        )
        self._closed = False

        self.users: Users = Users(self)
        self.streams: Streams = Streams(self)
        self.tags: Tags = Tags(self)
        self.categories: Categories = Categories(self)
        self.polls: Polls = Polls(self)
        self.badges: Badges = Badges(self)

    @property
    def closed(self) -> bool:
        return self._closed

    async def query(self, document: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Run a GraphQL query and return the parsed response.

        Transport and remote errors propagate unchanged.
        """
        return await self.transport.execute(document, variables)

    async def mutate(self, document: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Run a GraphQL mutation and return the parsed response."""
        return await self.transport.execute_mutation(document, variables)

    async def aclose(self) -> None:
        """Stop all batch loaders and fail any lookups still waiting."""
        if self._closed:
            return
        self._closed = True
        for loader in (self.users.loader, self.streams.loader, self.tags.loader):
            await loader.aclose()

    async def __aenter__(self) -> "TwitchData":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.aclose()
