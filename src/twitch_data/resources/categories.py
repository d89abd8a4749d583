"""Category resource wrapper."""

from __future__ import annotations

from typing import Any, Optional

from .. import queries
from ..utils import get_path
from .base import Resource
from ._common_types import (
    PaginatedResult,
    _key_variables,
    _normalize_key,
    _paginate,
    _promote_exact_matches,
    _validate_search,
)


class Categories(Resource):
    """Category (game) lookups and searches."""

    async def matching(self, query: str, first: int = 15, cursor: Optional[str] = None) -> PaginatedResult:
        """Find categories matching a search query.

        Parameters
        ----------
        query
            The category name to match.
        first
            How many results to return.
        cursor
            Cursor from a previous page, to fetch the next page.

        Returns
        -------
        PaginatedResult
            One page of categories; exact name or display name matches come first.
        """
        _validate_search(query, first)
        response = await self._query(queries.SEARCH_CATEGORY, {"query": query, "first": first, "cursor": cursor})
        result = _paginate(response, "searchCategories")
        result["items"] = _promote_exact_matches(result["items"], query, ("name", "displayName"))
        return result

    async def get(self, id: Optional[int | str] = None, name: Optional[str] = None) -> dict[str, Any] | None:
        """Fetch category details by id or name (exactly one is required)."""
        space, key = _normalize_key(id, name, login_name="name")
        response = await self._query(queries.CATEGORY_FETCH, _key_variables(space, key, login_name="name"))
        return get_path("data.game", response)
