"""Types and normalization helpers for the tags resource."""

from __future__ import annotations

import re
from typing import Any, Optional, TypedDict

# Canonical names of automatically applied language tags, e.g. ``auto___lang_en``.
LANGUAGE_MATCHER = re.compile(r"^auto___lang_(\w+)$")


class TagNode(TypedDict, total=False):
    """Raw tag node as returned by the endpoint."""
    id: str
    isAutomated: bool
    isLanguageTag: bool
    tagName: str
    localizedName: str
    localizedDescription: Optional[str]
    scope: str


class TagRecord(TypedDict, total=False):
    """Merged tag record held by the tag cache."""
    id: str
    value: str
    is_auto: bool
    is_language: bool
    language: Optional[str]
    name: str
    label: str
    scope: Optional[str]
    description: str


def _language_from_name(name: object) -> str | None:
    """Return the language code encoded in an automatic language tag name."""
    if not isinstance(name, str):
        return None
    match = LANGUAGE_MATCHER.match(name)
    return match.group(1) if match else None


def _normalize_tag_id(tag_id: Any) -> Any:
    """Accept either a tag id or a tag-shaped mapping and return the id."""
    if isinstance(tag_id, dict) and tag_id.get("id"):
        return tag_id["id"]
    return tag_id


def _is_complete(record: Optional[TagRecord]) -> bool:
    return bool(record and record.get("description"))


__all__ = ["LANGUAGE_MATCHER", "TagNode", "TagRecord"]
