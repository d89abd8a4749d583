"""Base resource helpers."""

from __future__ import annotations

from typing import Any, Optional, TYPE_CHECKING

from ..errors import ApplicationError
from ..utils import get_path

if TYPE_CHECKING:  # pragma: no cover
    from ..client import TwitchData


class Resource:
    """Shared helpers for resource classes."""

    def __init__(self, client: "TwitchData") -> None:
        self._client = client

    @property
    def _logger(self):
        return self._client._logger

    async def _query(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._client.query(document, variables)

    async def _mutate(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._client.mutate(document, variables)

    def _raise_for_error(self, response: Any, field: str) -> None:
        """Raise :class:`ApplicationError` when ``data.<field>.error`` carries a code."""
        error = get_path(f"data.{field}.error", response)
        if isinstance(error, dict) and error.get("code"):
            self._logger.warning("%s returned error code %s", field, error["code"])
            raise ApplicationError(str(error["code"]))
