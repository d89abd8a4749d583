"""Poll resource wrapper."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .. import queries
from ..utils import get_path
from .base import Resource
from .polls_types import DEFAULT_POLL_DURATION, PollResponse, _normalize_choices, _normalize_non_negative
from ._common_types import ValidationMode, _normalize_id


class Polls(Resource):
    """Channel poll operations."""

    def _poll_id(self, poll_id: int | str) -> str:
        key = _normalize_id(poll_id)
        if key is None:
            raise TypeError(f"Invalid poll_id: {poll_id!r}")
        return key

    async def get(self, poll_id: int | str) -> PollResponse | None:
        """Fetch a poll by id."""
        response = await self._query(queries.POLL_GET, {"id": self._poll_id(poll_id)})
        return get_path("data.poll", response)

    async def create(
        self,
        channel_id: int | str,
        title: str,
        choices: Sequence[str],
        *,
        bits: int = 0,
        duration: int = DEFAULT_POLL_DURATION,
        subscriber_multiplier: bool = False,
        subscriber_only: bool = False,
        validation: ValidationMode = "warn",
    ) -> PollResponse | None:
        """Create a poll in a channel.

        Parameters
        ----------
        channel_id
            Channel that owns the poll.
        title
            Poll title.
        choices
            Choice titles.
        bits
            Bits cost per vote. ``0`` disables bits voting.
        duration
            Poll length in seconds.
        subscriber_multiplier
            Count subscriber votes twice.
        subscriber_only
            Only allow subscribers to vote.
        validation
            Validation mode for ``bits`` and ``duration``: ``"off"`` sends
            inputs as-is, ``"warn"`` replaces invalid values with defaults and
            logs a warning, and ``"strict"`` raises on invalid values.

        Returns
        -------
        PollResponse or None
            The created poll.

        Raises
        ------
        TypeError
            If ``title`` is not a string or ``choices`` is not a list of strings.
        ApplicationError
            If the endpoint rejects the poll.
        """
        if not isinstance(title, str):
            raise TypeError("title must be string")
        choice_inputs = _normalize_choices(choices)
        if choice_inputs is None:
            raise TypeError("choices must be array of strings")
        owner = _normalize_id(channel_id)
        if owner is None:
            raise TypeError(f"Invalid channel_id: {channel_id!r}")

        if validation != "off":
            if _normalize_non_negative(bits) is None:
                if validation == "strict":
                    raise ValueError(f"Invalid bits: {bits}")
                self._logger.warning("Invalid bits for poll, using 0: %s", bits)
                bits = 0
            if _normalize_non_negative(duration) is None:
                if validation == "strict":
                    raise ValueError(f"Invalid duration: {duration}")
                self._logger.warning("Invalid duration for poll, using %s: %s", DEFAULT_POLL_DURATION, duration)
                duration = DEFAULT_POLL_DURATION

        payload: dict[str, Any] = {
            "bitsCost": bits,
            "bitsVoting": bits > 0 if validation != "off" else bool(bits),
            "choices": choice_inputs,
            "durationSeconds": duration,
            "ownedBy": owner,
            "subscriberMultiplier": bool(subscriber_multiplier),
            "subscriberOnly": bool(subscriber_only),
            "title": title,
        }
        response = await self._mutate(queries.POLL_CREATE, {"input": payload})
        self._raise_for_error(response, "createPoll")
        return get_path("data.createPoll.poll", response)

    async def archive(self, poll_id: int | str) -> PollResponse | None:
        """Move a finished poll into the archive."""
        response = await self._mutate(queries.POLL_ARCHIVE, {"id": self._poll_id(poll_id)})
        self._raise_for_error(response, "archivePoll")
        return get_path("data.archivePoll.poll", response)

    async def terminate(self, poll_id: int | str) -> PollResponse | None:
        """End a running poll early."""
        response = await self._mutate(queries.POLL_TERMINATE, {"id": self._poll_id(poll_id)})
        self._raise_for_error(response, "terminatePoll")
        return get_path("data.terminatePoll.poll", response)
