"""User resource wrapper."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, TYPE_CHECKING

from .. import queries
from ..batching import BatchLoader, Selection
from ..utils import get_path
from .base import Resource
from .users_types import FollowResponse, UserBasic
from ._common_types import (
    PaginatedResult,
    _index_nodes,
    _key_variables,
    _normalize_id,
    _normalize_key,
    _paginate,
    _promote_exact_matches,
    _validate_search,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..client import TwitchData


class Users(Resource):
    """User lookups, searches and follow operations."""

    def __init__(self, client: "TwitchData") -> None:
        super().__init__(client)
        self.loader = BatchLoader(
            "users",
            self._fetch_basic,
            spaces=("id", "login"),
            batch_size=client.batch_size,
            delay=client.batch_delay,
            logger=client._logger,
        )

    def get_basic(self, id: Optional[int | str] = None, login: Optional[str] = None) -> asyncio.Future:
        """Fetch basic information on a user, batched with concurrent lookups.

        Lookups issued close together are combined into a single request of up
        to ``batch_size`` users. Results are not cached.

        Parameters
        ----------
        id
            User id (integer or integer string).
        login
            User login.

        Returns
        -------
        asyncio.Future
            Resolves to the user dict, or ``None`` if no such user exists.

        Raises
        ------
        InvalidKeyError
            Immediately, unless exactly one of ``id`` and ``login`` is given.
        """
        space, key = _normalize_key(id, login)
        return self.loader.load(space, key)

    async def _fetch_basic(self, selection: Selection) -> dict[str, dict[str, UserBasic]]:
        response = await self._query(
            queries.USER_BULK,
            {
                "ids": selection["id"] or None,
                "logins": selection["login"] or None,
            },
        )
        return _index_nodes(get_path("data.users", response))

    async def _get_user_field(
        self,
        document: str,
        path: str,
        id: Optional[int | str],
        login: Optional[str],
    ) -> Any:
        space, key = _normalize_key(id, login)
        response = await self._query(document, _key_variables(space, key))
        return get_path(path, response)

    async def get(self, id: Optional[int | str] = None, login: Optional[str] = None) -> dict[str, Any] | None:
        """Fetch full user details by id or login (exactly one is required)."""
        return await self._get_user_field(queries.USER_FETCH, "data.user", id, login)

    async def get_game(self, id: Optional[int | str] = None, login: Optional[str] = None) -> dict[str, Any] | None:
        """Fetch the category a user's broadcast is currently set to."""
        return await self._get_user_field(queries.USER_GAME, "data.user.broadcastSettings.game", id, login)

    async def get_self(self, id: Optional[int | str] = None, login: Optional[str] = None) -> dict[str, Any] | None:
        """Fetch the signed-in user's relationship to a channel."""
        return await self._get_user_field(queries.USER_SELF, "data.user.self", id, login)

    async def get_followed(
        self,
        id: Optional[int | str] = None,
        login: Optional[str] = None,
    ) -> FollowResponse | None:
        """Fetch the follow relationship with a channel, or ``None`` if not following."""
        return await self._get_user_field(queries.USER_FOLLOWED, "data.user.self.follower", id, login)

    async def get_last_broadcast(
        self,
        id: Optional[int | str] = None,
        login: Optional[str] = None,
    ) -> dict[str, Any] | None:
        return await self._get_user_field(queries.LAST_BROADCAST, "data.user.lastBroadcast", id, login)

    async def get_broadcast_id(self, id: Optional[int | str] = None, login: Optional[str] = None) -> str | None:
        """Fetch the id of the current broadcast, which becomes the VOD id."""
        return await self._get_user_field(queries.BROADCAST_ID, "data.user.stream.archiveVideo.id", id, login)

    async def get_color(self, id: Optional[int | str] = None, login: Optional[str] = None) -> str | None:
        return await self._get_user_field(queries.USER_COLOR, "data.user.primaryColorHex", id, login)

    async def matching(self, query: str, first: int = 15, cursor: Optional[str] = None) -> PaginatedResult:
        """Find users matching a search query.

        Parameters
        ----------
        query
            Text to match in the login or display name.
        first
            How many results to return.
        cursor
            Cursor from a previous page, to fetch the next page.

        Returns
        -------
        PaginatedResult
            One page of users; exact login or display name matches come first.
        """
        _validate_search(query, first)
        response = await self._query(queries.SEARCH_USER, {"query": query, "first": first, "cursor": cursor})
        result = _paginate(response, "searchUsers")
        result["items"] = _promote_exact_matches(result["items"], query, ("login", "displayName"))
        return result

    async def follow(self, channel_id: int | str, disable_notifications: bool = False) -> FollowResponse | None:
        """Follow a channel.

        Raises
        ------
        ApplicationError
            If the endpoint reports an error code for the follow.
        """
        target = _normalize_id(channel_id)
        if target is None:
            raise TypeError(f"Invalid channel_id: {channel_id!r}")
        response = await self._mutate(
            queries.FOLLOW_USER,
            {"input": {"targetID": target, "disableNotifications": bool(disable_notifications)}},
        )
        self._raise_for_error(response, "followUser")
        return get_path("data.followUser.follow", response)

    async def unfollow(self, channel_id: int | str) -> FollowResponse | None:
        """Unfollow a channel."""
        target = _normalize_id(channel_id)
        if target is None:
            raise TypeError(f"Invalid channel_id: {channel_id!r}")
        response = await self._mutate(queries.UNFOLLOW_USER, {"input": {"targetID": target}})
        self._raise_for_error(response, "unfollowUser")
        return get_path("data.unfollowUser.follow", response)
