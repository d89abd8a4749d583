"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across resources that coerce inputs)
- The paginated search result shape
- Lookup key normalization (exactly one of id or login)
- Exact-match promotion for name searches
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Sequence, TypedDict

from ..errors import InvalidKeyError
from ..utils import get_path

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]

# --- Identifier Spaces --- #
KeySpace = Literal["id", "login"]


class PaginatedResult(TypedDict):
    """One page of search results."""
    cursor: Optional[str]
    items: list[dict[str, Any]]
    finished: bool
    count: int


# --- Lookup Key Normalization --- #
def _normalize_id(value: object) -> str | None:
    """Normalize an identifier to the string form the endpoint uses.

    Integers and non-empty strings are accepted; booleans, empty strings and
    anything else yield ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _normalize_key(
    id: object = None,
    login: object = None,
    *,
    login_name: str = "login",
) -> tuple[KeySpace, str]:
    """Return the identifier space and key for an ``(id, login)`` pair.

    Parameters
    ----------
    id
        Numeric or string identifier.
    login
        Login (or name) string.
    login_name
        Name of the second argument, used in the error message.

    Returns
    -------
    tuple[str, str]
        ``("id", key)`` or ``("login", key)``.

    Raises
    ------
    InvalidKeyError
        If neither or both are supplied, or the supplied value is unusable.
    """
    has_id = id is not None and id != ""
    has_login = login is not None and login != ""
    if has_id == has_login:
        raise InvalidKeyError(f"Exactly one of id and {login_name} must be provided")
    if has_id:
        key = _normalize_id(id)
        if key is None:
            raise InvalidKeyError(f"Invalid id: {id!r}")
        return "id", key
    if not isinstance(login, str):
        raise InvalidKeyError(f"Invalid {login_name}: {login!r}")
    return "login", login


def _key_variables(space: KeySpace, key: str, *, login_name: str = "login") -> dict[str, Optional[str]]:
    """Build the ``{id, login}`` variables for a single-entity query."""
    if space == "id":
        return {"id": key, login_name: None}
    return {"id": None, login_name: key}


# --- Search Result Helpers --- #
def _promote_exact_matches(
    items: list[dict[str, Any]],
    query: str,
    fields: Sequence[str],
) -> list[dict[str, Any]]:
    """Move items whose ``fields`` match ``query`` case-insensitively to the front.

    The sort is stable, so the remote ordering is kept within both groups.
    """
    needle = query.lower()

    def _is_match(item: object) -> bool:
        if not isinstance(item, dict):
            return False
        for field in fields:
            value = item.get(field)
            if isinstance(value, str) and value.lower() == needle:
                return True
        return False

    return sorted(items, key=lambda item: 0 if _is_match(item) else 1)


def _paginate(response: Any, root: str) -> PaginatedResult:
    """Normalize a connection-shaped response at ``data.<root>``."""
    items = get_path(f"data.{root}.edges.@each.node", response)
    if not isinstance(items, list):
        items = []
    items = [item for item in items if item is not None]
    finished = not get_path(f"data.{root}.pageInfo.hasNextPage", response)
    return {
        "cursor": None if finished else get_path(f"data.{root}.edges.@last.cursor", response),
        "items": items,
        "finished": finished,
        "count": get_path(f"data.{root}.totalCount", response) or 0,
    }


def _validate_search(query: object, first: object) -> None:
    if not isinstance(query, str):
        raise TypeError("query must be a string")
    if isinstance(first, bool) or not isinstance(first, int) or first < 1:
        raise TypeError("first must be a positive integer")


def _index_nodes(nodes: Any, value_field: Optional[str] = None) -> dict[str, dict[str, Any]]:
    """Index user-shaped nodes by id and by login for batch fan-out.

    Parameters
    ----------
    nodes
        List of nodes carrying ``id`` and ``login``. Anything else is ignored.
    value_field
        When set, the indexed value is ``node[value_field]`` instead of the node.

    Returns
    -------
    dict
        ``{"id": {id: value}, "login": {login: value}}``.
    """
    found: dict[str, dict[str, Any]] = {"id": {}, "login": {}}
    if not isinstance(nodes, list):
        return found
    for node in nodes:
        if not isinstance(node, dict) or not node.get("id"):
            continue
        value = node.get(value_field) if value_field else node
        found["id"][str(node["id"])] = value
        login = node.get("login")
        if isinstance(login, str):
            found["login"][login] = value
    return found
