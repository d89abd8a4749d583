"""Stream resource wrapper."""

from __future__ import annotations

import asyncio
from typing import Optional, TYPE_CHECKING

from .. import queries
from ..batching import BatchLoader, Selection
from ..utils import get_path
from .base import Resource
from .streams_types import StreamMeta
from ._common_types import _index_nodes, _normalize_key

if TYPE_CHECKING:  # pragma: no cover
    from ..client import TwitchData


class Streams(Resource):
    """Live stream metadata lookups."""

    def __init__(self, client: "TwitchData") -> None:
        super().__init__(client)
        self.loader = BatchLoader(
            "streams",
            self._fetch_meta,
            spaces=("id", "login"),
            batch_size=client.batch_size,
            delay=client.batch_delay,
            logger=client._logger,
        )

    def get_meta(self, id: Optional[int | str] = None, login: Optional[str] = None) -> asyncio.Future:
        """Fetch stream metadata for a channel, batched with concurrent lookups.

        Parameters
        ----------
        id
            Channel id (integer or integer string).
        login
            Channel login.

        Returns
        -------
        asyncio.Future
            Resolves to the live stream dict, or ``None`` when the channel is
            offline or does not exist.

        Raises
        ------
        InvalidKeyError
            Immediately, unless exactly one of ``id`` and ``login`` is given.
        """
        space, key = _normalize_key(id, login)
        return self.loader.load(space, key)

    async def _fetch_meta(self, selection: Selection) -> dict[str, dict[str, StreamMeta | None]]:
        response = await self._query(
            queries.STREAM_FETCH,
            {
                "ids": selection["id"] or None,
                "logins": selection["login"] or None,
            },
        )
        return _index_nodes(get_path("data.users", response), "stream")
