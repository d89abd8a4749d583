"""Types for the users resource."""

from __future__ import annotations

from typing import Optional, TypedDict
from typing_extensions import ReadOnly


class UserBasic(TypedDict, total=False):
    """Readonly user dict returned by the bulk user lookup."""
    id: ReadOnly[str]
    login: ReadOnly[str]
    displayName: ReadOnly[str]
    profileImageURL: ReadOnly[Optional[str]]


class FollowResponse(TypedDict, total=False):
    """Readonly follow relationship."""
    followedAt: ReadOnly[str]
    disableNotifications: ReadOnly[bool]


__all__ = ["FollowResponse", "UserBasic"]
