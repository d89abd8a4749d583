"""Default GraphQL transport backed by ``requests``."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional, Protocol

import requests

from .errors import RemoteError, TransportError

DEFAULT_GQL_URL = os.environ.get("TWITCH_GQL_URL", "https://gql.twitch.tv/gql")
DEFAULT_CLIENT_ID = os.environ.get("TWITCH_CLIENT_ID")


class Transport(Protocol):
    """Anything able to run a GraphQL document and return the parsed response."""

    async def execute(self, document: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        ...

    async def execute_mutation(self, document: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        ...


class GqlTransport:
    """Post GraphQL documents to a single HTTP endpoint.

    Requests are sent with ``requests`` on a worker thread so the event loop
    is never blocked.
    """

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        client_id: Optional[str] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        """Create a transport bound to a GraphQL endpoint.

        Parameters
        ----------
        url
            Endpoint URL. Defaults to ``TWITCH_GQL_URL`` or the public endpoint.
        client_id
            Value for the ``Client-ID`` header. Defaults to ``TWITCH_CLIENT_ID``.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        headers
            Extra headers sent with every request.
        """
        self.url = url or DEFAULT_GQL_URL
        self.client_id = client_id or DEFAULT_CLIENT_ID
        self.default_timeout = default_timeout
        self._session = session
        self._headers = dict(headers or {})
        if self.client_id:
            self._headers.setdefault("Client-ID", self.client_id)
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        *,
        timeout: Optional[int] = None,
    ) -> dict[str, Any]:
        """Run a query document and return the parsed response."""
        return await asyncio.to_thread(self.post, document, variables, timeout=timeout)

    async def execute_mutation(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        *,
        timeout: Optional[int] = None,
    ) -> dict[str, Any]:
        """Run a mutation document and return the parsed response."""
        return await asyncio.to_thread(self.post, document, variables, timeout=timeout)

    def post(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        *,
        timeout: Optional[int] = None,
    ) -> dict[str, Any]:
        """Send one GraphQL request synchronously.

        Parameters
        ----------
        document
            GraphQL query or mutation text.
        variables
            Variables for the document.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        dict
            Parsed response payload, including its ``data`` key.

        Raises
        ------
        TransportError
            On connection failures, HTTP errors or a non-JSON body.
        RemoteError
            When the response carries ``errors`` and no ``data``.
        """
        payload: dict[str, Any] = {"query": document}
        if variables is not None:
            payload["variables"] = variables

        requester = self._session or requests
        try:
            response = requester.request(
                "POST",
                self.url,
                json=payload,
                headers=self._headers,
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            # Extract error message from response body if available
            error_msg = str(exc)
            try:
                error_body = response.json()
                if isinstance(error_body, dict):
                    if "message" in error_body:
                        error_msg = f"{exc}\nServer message: {error_body['message']}"
                    elif "error" in error_body:
                        error_msg = f"{exc}\nServer error: {error_body['error']}"
                    elif "detail" in error_body:
                        error_msg = f"{exc}\nDetails: {error_body['detail']}"
            except (ValueError, AttributeError, KeyError):
                pass  # Response wasn't JSON or didn't have expected fields
            self._logger.warning("Request failed for POST %s: %s", self.url, error_msg)
            raise TransportError(error_msg) from exc
        except requests.RequestException as exc:
            self._logger.warning("Request failed for POST %s: %s", self.url, exc)
            raise TransportError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            self._logger.warning("Response from POST %s was not JSON", self.url)
            raise TransportError(f"Response from {self.url} was not JSON") from exc
        if not isinstance(body, dict):
            raise TransportError(f"Unexpected response shape from {self.url}: {type(body).__name__}")

        errors = body.get("errors")
        if errors and body.get("data") is None:
            first = errors[0] if isinstance(errors, list) and errors else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise RemoteError(message or "GraphQL request failed", errors if isinstance(errors, list) else [errors])
        return body


__all__ = ["DEFAULT_CLIENT_ID", "DEFAULT_GQL_URL", "GqlTransport", "Transport"]
