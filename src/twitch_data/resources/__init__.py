"""Resource module exports."""

from .badges import Badges
from .categories import Categories
from .polls import Polls
from .streams import Streams
from .tags import Tags
from .users import Users

__all__ = [
    "Badges",
    "Categories",
    "Polls",
    "Streams",
    "Tags",
    "Users",
]
