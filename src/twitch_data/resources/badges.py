"""Chat badge resource wrapper."""

from __future__ import annotations

from typing import Any

from .. import queries
from ..utils import get_path
from .base import Resource


class Badges(Resource):
    """Global chat badges."""

    async def list(self) -> list[dict[str, Any]]:
        response = await self._query(queries.GLOBAL_BADGES)
        badges = get_path("data.badges", response)
        if isinstance(badges, list):
            return badges
        self._logger.warning("Badges response missing expected badges list.")
        return []
