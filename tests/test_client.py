import asyncio
import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import requests

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from twitch_data.client import TwitchData  # noqa: E402
from twitch_data.errors import ClientClosedError, RemoteError, TransportError  # noqa: E402
from twitch_data.transport import GqlTransport  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


class FakeResponse:
    def __init__(self, *, json_payload=None, json_error=False, status_error=None):
        self._json_payload = json_payload
        self._json_error = json_error
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if self._json_error:
            raise ValueError("bad json")
        return self._json_payload


class FakeSession:
    def __init__(self, response: FakeResponse):
        self.response = response
        self.calls = []

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append((method, url, json, headers, timeout))
        return self.response


class TransportTests(unittest.TestCase):
    def test_post_sends_document_and_headers(self):
        session = FakeSession(FakeResponse(json_payload={"data": {"ok": True}}))
        transport = GqlTransport(url="https://example.com/gql", client_id="abc", session=session)
        result = transport.post("query { ok }", {"a": 1})
        self.assertEqual(result, {"data": {"ok": True}})
        method, url, payload, headers, timeout = session.calls[0]
        self.assertEqual(method, "POST")
        self.assertEqual(url, "https://example.com/gql")
        self.assertEqual(payload, {"query": "query { ok }", "variables": {"a": 1}})
        self.assertEqual(headers, {"Client-ID": "abc"})
        self.assertEqual(timeout, transport.default_timeout)

    def test_post_without_variables(self):
        session = FakeSession(FakeResponse(json_payload={"data": {}}))
        transport = GqlTransport(url="https://example.com/gql", session=session, headers={"X": "1"})
        transport.post("query { ok }", timeout=3)
        _method, _url, payload, headers, timeout = session.calls[0]
        self.assertEqual(payload, {"query": "query { ok }"})
        self.assertEqual(headers.get("X"), "1")
        self.assertEqual(timeout, 3)

    def test_http_error_includes_server_message(self):
        error = requests.HTTPError("bad")
        session = FakeSession(FakeResponse(json_payload={"message": "rate limited"}, status_error=error))
        transport = GqlTransport(session=session)
        with self.assertRaises(TransportError) as ctx:
            transport.post("query { ok }")
        self.assertIn("rate limited", str(ctx.exception))
        self.assertIs(ctx.exception.__cause__, error)

    def test_http_error_with_bad_json_body(self):
        error = requests.HTTPError("bad")
        session = FakeSession(FakeResponse(json_error=True, status_error=error))
        transport = GqlTransport(session=session)
        with self.assertRaises(TransportError):
            transport.post("query { ok }")

    def test_non_json_body(self):
        session = FakeSession(FakeResponse(json_error=True))
        with self.assertRaises(TransportError):
            GqlTransport(session=session).post("query { ok }")

    def test_non_dict_body(self):
        session = FakeSession(FakeResponse(json_payload=[1, 2]))
        with self.assertRaises(TransportError):
            GqlTransport(session=session).post("query { ok }")

    def test_graphql_errors_without_data(self):
        payload = {"errors": [{"message": "service timeout"}], "data": None}
        session = FakeSession(FakeResponse(json_payload=payload))
        with self.assertRaises(RemoteError) as ctx:
            GqlTransport(session=session).post("query { ok }")
        self.assertEqual(str(ctx.exception), "service timeout")
        self.assertEqual(ctx.exception.errors, payload["errors"])

    def test_graphql_errors_with_partial_data(self):
        payload = {"errors": [{"message": "partial"}], "data": {"user": None}}
        session = FakeSession(FakeResponse(json_payload=payload))
        self.assertEqual(GqlTransport(session=session).post("query { ok }"), payload)

    def test_connection_error_without_session(self):
        transport = GqlTransport()
        with patch("twitch_data.transport.requests.request", side_effect=requests.ConnectionError("boom")):
            with self.assertRaises(TransportError):
                transport.post("query { ok }")


class TransportAsyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_execute_and_mutation_run_post(self):
        session = FakeSession(FakeResponse(json_payload={"data": {"ok": 1}}))
        transport = GqlTransport(session=session)
        self.assertEqual(await transport.execute("query { ok }"), {"data": {"ok": 1}})
        self.assertEqual(await transport.execute_mutation("mutation { ok }", {"x": 1}), {"data": {"ok": 1}})
        self.assertEqual(len(session.calls), 2)


class ClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_default_transport_uses_arguments(self):
        session = FakeSession(FakeResponse(json_payload={"data": {"ok": 1}}))
        client = TwitchData(url="https://example.com/gql", client_id="abc", session=session, default_timeout=5)
        self.assertIsInstance(client.transport, GqlTransport)
        self.assertEqual(await client.query("query { ok }"), {"data": {"ok": 1}})
        self.assertEqual(session.calls[0][1], "https://example.com/gql")
        self.assertEqual(session.calls[0][4], 5)
        await client.aclose()

    async def test_custom_transport(self):
        class Transport:
            async def execute(self, document, variables=None):
                return {"data": {"q": variables}}

            async def execute_mutation(self, document, variables=None):
                return {"data": {"m": variables}}

        client = TwitchData(transport=Transport())
        self.assertEqual(await client.query("q", {"a": 1}), {"data": {"q": {"a": 1}}})
        self.assertEqual(await client.mutate("m", {"b": 2}), {"data": {"m": {"b": 2}}})
        await client.aclose()
        self.assertTrue(client.closed)

    async def test_close_rejects_pending_lookups(self):
        class Transport:
            async def execute(self, document, variables=None):  # pragma: no cover - never dispatched
                return {"data": {}}

            async def execute_mutation(self, document, variables=None):  # pragma: no cover
                return {"data": {}}

        async with TwitchData(transport=Transport(), batch_delay=10) as client:
            user = client.users.get_basic(1)
            stream = client.streams.get_meta(login="foo")
            tag = client.tags.get("t1")
        results = await asyncio.gather(user, stream, tag, return_exceptions=True)
        self.assertTrue(all(isinstance(result, ClientClosedError) for result in results))
        with self.assertRaises(ClientClosedError):
            await client.users.get_basic(2)
        await client.aclose()


if __name__ == "__main__":
    unittest.main()
