"""Content tag resource wrapper and tag cache."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any, Callable, Optional, Sequence, TYPE_CHECKING

from .. import queries
from ..batching import BatchLoader, Selection
from ..errors import InvalidKeyError
from ..utils import Debouncer, get_path
from .base import Resource
from .tags_types import TagNode, TagRecord, _is_complete, _language_from_name, _normalize_tag_id
from ._common_types import _normalize_id

if TYPE_CHECKING:  # pragma: no cover
    from ..client import TwitchData

TagCallback = Callable[..., Any]


class Tags(Resource):
    """Content tag lookups backed by a process-lifetime cache.

    Tags never change once known, so every well-formed tag node seen in any
    response is merged into the cache. A cached tag without a description is
    still served unless the caller asks for the description, in which case it
    is fetched again.
    """

    def __init__(self, client: "TwitchData") -> None:
        super().__init__(client)
        self._cache: dict[str, TagRecord] = {}
        self.loader = BatchLoader(
            "tags",
            self._fetch_tags,
            spaces=("id",),
            batch_size=client.batch_size,
            delay=client.batch_delay,
            logger=client._logger,
        )

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, tag_id: object) -> bool:
        key = _normalize_id(_normalize_tag_id(tag_id))
        return key is not None and key in self._cache

    def memorize(self, node: TagNode | Any, dispatch: bool = True) -> TagRecord | None:
        """Merge a raw tag node into the cache.

        Parameters
        ----------
        node
            Raw tag node. Nodes without an id, ``tagName`` or ``localizedName``
            are ignored.
        dispatch
            When the merged record has a description, resolve any lookups
            already waiting on this tag.

        Returns
        -------
        TagRecord or None
            A copy of the merged record, or ``None`` if the node was ignored.
        """
        if not isinstance(node, dict):
            return None
        if not node.get("id") or not node.get("tagName") or not node.get("localizedName"):
            return None
        key = _normalize_id(node["id"])
        if key is None:
            return None

        record = self._cache.get(key)
        if record is None:
            is_language = bool(node.get("isLanguageTag"))
            record = {
                "id": node["id"],
                "value": node["id"],
                "is_auto": bool(node.get("isAutomated")),
                "is_language": is_language,
                "language": _language_from_name(node["tagName"]) if is_language else None,
                "name": node["tagName"],
                "scope": node.get("scope"),
            }
            self._cache[key] = record

        if node.get("localizedName"):
            record["label"] = node["localizedName"]
        if node.get("localizedDescription"):
            record["description"] = node["localizedDescription"]

        registry = self.loader.registry("id")
        if dispatch and _is_complete(record) and key in registry:
            registry.resolve(key, dict(record))

        return dict(record)

    async def _fetch_tags(self, selection: Selection) -> dict[str, dict[str, TagRecord]]:
        response = await self._query(queries.TAGS_FETCH, {"ids": selection["id"]})
        nodes = get_path("data.contentTags", response)
        found: dict[str, TagRecord] = {}
        if isinstance(nodes, list):
            for node in nodes:
                record = self.memorize(node, dispatch=False)
                if record is not None:
                    found[str(_normalize_id(record["id"]))] = record
        return {"id": found}

    def _cache_key(self, tag_id: Any) -> str:
        key = _normalize_id(tag_id)
        if key is None:
            raise InvalidKeyError(f"Invalid tag id: {tag_id!r}")
        return key

    def get(self, tag_id: Any, want_description: bool = False) -> asyncio.Future:
        """Fetch a tag, from the cache when possible.

        Parameters
        ----------
        tag_id
            Tag id, or a tag dict carrying an ``id``.
        want_description
            Treat a cached tag without a description as a miss.

        Returns
        -------
        asyncio.Future
            Resolves to a copy of the tag record, or ``None`` if the tag does
            not exist.
        """
        key = self._cache_key(_normalize_tag_id(tag_id))
        record = self._cache.get(key)
        if record is not None and (_is_complete(record) or not want_description):
            future = asyncio.get_running_loop().create_future()
            future.set_result(dict(record))
            return future
        return self.loader.load("id", key)

    def get_immediate(
        self,
        tag_id: Any,
        callback: Optional[TagCallback] = None,
        want_description: bool = False,
    ) -> TagRecord | None:
        """Return a cached tag without waiting, fetching it in the background if needed.

        When the tag is missing (or lacks a wanted description) and a callback
        is given, the tag is fetched and ``callback(tag_id, record)`` is called
        on success or ``callback(tag_id, None, error)`` on failure. A wanted
        description is fetched even without a callback so later calls hit.

        Must be called from within a running event loop whenever a fetch may
        be triggered.
        """
        tag_id = _normalize_tag_id(tag_id)
        key = self._cache_key(tag_id)
        record = self._cache.get(key)

        wants_refetch = want_description and not _is_complete(record)
        if wants_refetch or (record is None and callback is not None):
            future = self.get(tag_id, want_description)
            if callback is not None:
                future.add_done_callback(partial(_notify, tag_id, callback))
            else:
                future.add_done_callback(self._log_background_failure)

        return dict(record) if record is not None else None

    def _log_background_failure(self, future: asyncio.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.warning("Background tag fetch failed: %s", error)

    async def top(self, limit: int = 50) -> list[TagRecord]:
        """Fetch the most used tags, caching each one.

        Complete tags received here also satisfy individual lookups that are
        already waiting on them.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise TypeError(f"Invalid limit: {limit!r}")
        response = await self._query(queries.TAGS_TOP, {"limit": limit})
        nodes = get_path("data.topTags", response)
        if not isinstance(nodes, list):
            return []

        out: list[TagRecord] = []
        seen: set[Any] = set()
        for node in nodes:
            if not isinstance(node, dict) or node.get("id") in seen:
                continue
            seen.add(node.get("id"))
            record = self.memorize(node)
            if record is not None:
                out.append(record)
        return out

    async def matching(
        self,
        query: str,
        category: Optional[int | str] = None,
        *,
        limit: int = 100,
    ) -> list[TagRecord]:
        """Search live tags.

        Parameters
        ----------
        query
            Search text.
        category
            Restrict the search to tags used in this category.
        limit
            Maximum number of tags to return.

        Returns
        -------
        list[TagRecord]
            Matching tags, each also merged into the cache.
        """
        if not isinstance(query, str):
            raise TypeError("query must be a string")
        response = await self._query(
            queries.SEARCH_TAGS,
            {"query": query, "categoryID": _normalize_id(category), "limit": limit},
        )
        nodes = get_path("data.searchLiveTags", response)
        if not isinstance(nodes, list) or not nodes:
            return []

        out: list[TagRecord] = []
        for node in nodes:
            record = self.memorize(node)
            if record is not None:
                out.append(record)
        return out

    def languages_from_tags(
        self,
        tags: Sequence[Any],
        callback: Optional[Callable[[list[str]], Any]] = None,
    ) -> list[str]:
        """Return the language codes of the cached language tags in ``tags``.

        Uncached tags are fetched in the background. With a callback, the
        languages are computed again once those fetches settle and passed to
        ``callback(languages)``; bursts of completions are collapsed into a
        single call.
        """
        refresh: Optional[Debouncer] = None
        if callback is not None:
            refresh = Debouncer(
                lambda: callback(self.languages_from_tags(tags)),
                self._client.language_delay,
            )

        out: list[str] = []
        if not isinstance(tags, (list, tuple)):
            return out
        for tag_id in tags:
            if _normalize_id(_normalize_tag_id(tag_id)) is None:
                self._logger.warning("Skipping invalid tag id: %s", tag_id)
                continue
            record = self.get_immediate(tag_id, refresh)
            if record and record.get("is_language"):
                language = _language_from_name(record.get("name"))
                if language:
                    out.append(language)
        return out


def _notify(tag_id: Any, callback: TagCallback, future: asyncio.Future) -> None:
    if future.cancelled():
        callback(tag_id, None, asyncio.CancelledError())
        return
    error = future.exception()
    if error is not None:
        callback(tag_id, None, error)
    else:
        callback(tag_id, future.result())
