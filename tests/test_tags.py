import asyncio
import logging
import sys
import unittest
from pathlib import Path

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from twitch_data import queries  # noqa: E402
from twitch_data.client import TwitchData  # noqa: E402
from twitch_data.errors import InvalidKeyError, TransportError  # noqa: E402
from twitch_data.resources.tags_types import _language_from_name, _normalize_tag_id  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


def tag_node(tag_id, name="speedrun", label="Speedrun", description=None, **extra):
    node = {
        "id": tag_id,
        "isAutomated": False,
        "isLanguageTag": False,
        "tagName": name,
        "localizedName": label,
        "scope": "ALL",
    }
    if description is not None:
        node["localizedDescription"] = description
    node.update(extra)
    return node


class FakeTransport:
    def __init__(self, handler=None) -> None:
        self.calls: list[tuple[str, object]] = []
        self.handler = handler or (lambda document, variables: {"data": {}})

    async def execute(self, document, variables=None):
        self.calls.append((document, variables))
        result = self.handler(document, variables)
        if isinstance(result, BaseException):
            raise result
        return result

    async def execute_mutation(self, document, variables=None):  # pragma: no cover - unused here
        return await self.execute(document, variables)


def content_tags(*nodes):
    return lambda document, variables: {"data": {"contentTags": list(nodes)}}


class TagTypesTests(unittest.TestCase):
    def test_language_from_name(self):
        self.assertEqual(_language_from_name("auto___lang_en"), "en")
        self.assertEqual(_language_from_name("auto___lang_zh_hk"), "zh_hk")
        self.assertIsNone(_language_from_name("speedrun"))
        self.assertIsNone(_language_from_name(None))

    def test_normalize_tag_id(self):
        self.assertEqual(_normalize_tag_id({"id": "abc", "label": "x"}), "abc")
        self.assertEqual(_normalize_tag_id(50), 50)
        self.assertEqual(_normalize_tag_id({}), {})


class MemorizeTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.transport = FakeTransport()
        self.client = TwitchData(transport=self.transport, batch_delay=0.01)
        self.tags = self.client.tags

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    async def test_malformed_nodes_are_ignored(self):
        self.assertIsNone(self.tags.memorize(None))
        self.assertIsNone(self.tags.memorize({"tagName": "x", "localizedName": "X"}))
        self.assertIsNone(self.tags.memorize({"id": "1", "localizedName": "X"}))
        self.assertIsNone(self.tags.memorize({"id": "1", "tagName": "x"}))
        self.assertEqual(len(self.tags), 0)

    async def test_memorize_builds_record(self):
        record = self.tags.memorize(tag_node("t1", description="Fast"))
        self.assertEqual(record, {
            "id": "t1",
            "value": "t1",
            "is_auto": False,
            "is_language": False,
            "language": None,
            "name": "speedrun",
            "label": "Speedrun",
            "scope": "ALL",
            "description": "Fast",
        })
        self.assertIn("t1", self.tags)
        self.assertIn({"id": "t1"}, self.tags)

    async def test_language_tag_derives_code(self):
        record = self.tags.memorize(
            tag_node("t2", name="auto___lang_de", label="Deutsch", isLanguageTag=True, isAutomated=True)
        )
        self.assertTrue(record["is_language"])
        self.assertTrue(record["is_auto"])
        self.assertEqual(record["language"], "de")

    async def test_language_code_needs_language_flag(self):
        record = self.tags.memorize(tag_node("t3", name="auto___lang_de"))
        self.assertIsNone(record["language"])

    async def test_memorize_is_idempotent(self):
        first = self.tags.memorize(tag_node("t1", description="Fast"))
        second = self.tags.memorize(tag_node("t1", description="Fast"))
        self.assertEqual(first, second)
        self.assertEqual(len(self.tags), 1)

    async def test_memorize_is_monotonic(self):
        self.tags.memorize(tag_node("t1", description="Fast"))
        record = self.tags.memorize(tag_node("t1", label="Speedrunning"))
        self.assertEqual(record["description"], "Fast")
        self.assertEqual(record["label"], "Speedrunning")

    async def test_memorize_returns_copy(self):
        record = self.tags.memorize(tag_node("t1"))
        record["label"] = "mutated"
        self.assertEqual(self.tags.get_immediate("t1")["label"], "Speedrun")

    async def test_dispatch_resolves_pending_lookups(self):
        client = TwitchData(transport=self.transport, batch_delay=10)
        pending = client.tags.get("t1")
        client.tags.memorize(tag_node("t1"))
        self.assertFalse(pending.done())
        client.tags.memorize(tag_node("t1", description="Fast"), dispatch=False)
        self.assertFalse(pending.done())
        client.tags.memorize(tag_node("t1", description="Fast"))
        self.assertEqual((await pending)["description"], "Fast")
        self.assertEqual(self.transport.calls, [])
        await client.aclose()


class GetTagTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.transport = FakeTransport()
        self.client = TwitchData(transport=self.transport, batch_delay=0.01)
        self.tags = self.client.tags

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    async def test_get_invalid_id(self):
        with self.assertRaises(InvalidKeyError):
            self.tags.get(None)
        with self.assertRaises(InvalidKeyError):
            self.tags.get_immediate("")

    async def test_get_batches_and_caches(self):
        self.transport.handler = content_tags(tag_node("a"), tag_node("b", description="B"), {"id": "bad"})
        a, b, c = await asyncio.gather(self.tags.get("a"), self.tags.get({"id": "b"}), self.tags.get("c"))
        self.assertEqual(a["label"], "Speedrun")
        self.assertEqual(b["description"], "B")
        self.assertIsNone(c)
        self.assertEqual(len(self.transport.calls), 1)
        document, variables = self.transport.calls[0]
        self.assertIs(document, queries.TAGS_FETCH)
        self.assertEqual(variables, {"ids": ["a", "b", "c"]})
        self.assertEqual(len(self.tags), 2)

    async def test_cache_hit_without_description_needs_no_fetch(self):
        self.tags.memorize(tag_node("a"))
        record = await self.tags.get("a")
        self.assertEqual(record["id"], "a")
        self.assertEqual(self.transport.calls, [])

    async def test_want_description_refetches_incomplete(self):
        self.tags.memorize(tag_node("a"))
        self.transport.handler = content_tags(tag_node("a", description="Now complete"))
        record = await self.tags.get("a", want_description=True)
        self.assertEqual(record["description"], "Now complete")
        self.assertEqual(len(self.transport.calls), 1)
        again = await self.tags.get("a", want_description=True)
        self.assertEqual(again["description"], "Now complete")
        self.assertEqual(len(self.transport.calls), 1)

    async def test_more_than_batch_size_tags(self):
        self.transport.handler = lambda document, variables: {
            "data": {"contentTags": [tag_node(tag_id) for tag_id in variables["ids"]]}
        }
        records = await asyncio.gather(*(self.tags.get(i) for i in range(75)))
        self.assertEqual([record["id"] for record in records], [str(i) for i in range(75)])
        self.assertEqual([len(call[1]["ids"]) for call in self.transport.calls], [50, 25])

    async def test_failure_leaves_cache_untouched(self):
        self.tags.memorize(tag_node("a"))
        error = TransportError("offline")
        self.transport.handler = lambda document, variables: error
        with self.assertRaises(TransportError):
            await self.tags.get("a", want_description=True)
        self.assertNotIn("description", self.tags.get_immediate("a"))
        self.assertEqual(len(self.tags), 1)

    async def test_get_immediate_miss_invokes_callback_once(self):
        self.transport.handler = content_tags(tag_node("50"))
        calls = []
        done = asyncio.Event()

        def callback(*args):
            calls.append(args)
            done.set()

        self.assertIsNone(self.tags.get_immediate(50, callback))
        await asyncio.wait_for(done.wait(), 1)
        await asyncio.sleep(0.02)
        self.assertEqual(len(calls), 1)
        tag_id, record = calls[0]
        self.assertEqual(tag_id, 50)
        self.assertEqual(record["id"], "50")
        self.assertEqual(self.tags.get_immediate(50)["id"], "50")

    async def test_get_immediate_not_found(self):
        self.transport.handler = content_tags()
        calls = []
        done = asyncio.Event()

        def callback(*args):
            calls.append(args)
            done.set()

        self.tags.get_immediate(50, callback)
        await asyncio.wait_for(done.wait(), 1)
        self.assertEqual(calls, [(50, None)])

    async def test_get_immediate_failure_passes_error(self):
        error = TransportError("offline")
        self.transport.handler = lambda document, variables: error
        calls = []
        done = asyncio.Event()

        def callback(*args):
            calls.append(args)
            done.set()

        self.tags.get_immediate("t9", callback)
        await asyncio.wait_for(done.wait(), 1)
        self.assertEqual(calls, [("t9", None, error)])

    async def test_get_immediate_hit_does_not_fetch(self):
        self.tags.memorize(tag_node("a"))
        calls = []
        record = self.tags.get_immediate("a", lambda *args: calls.append(args))
        self.assertEqual(record["label"], "Speedrun")
        await asyncio.sleep(0.03)
        self.assertEqual(calls, [])
        self.assertEqual(self.transport.calls, [])

    async def test_get_immediate_wanting_description_prefetches(self):
        self.tags.memorize(tag_node("a"))
        self.transport.handler = content_tags(tag_node("a", description="Full"))
        record = self.tags.get_immediate("a", want_description=True)
        self.assertNotIn("description", record)
        await asyncio.sleep(0.05)
        self.assertEqual(len(self.transport.calls), 1)
        self.assertEqual(self.tags.get_immediate("a")["description"], "Full")


class TagSearchTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.transport = FakeTransport()
        self.client = TwitchData(transport=self.transport, batch_delay=0.01)
        self.tags = self.client.tags

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    async def test_top_dedupes_and_memorizes(self):
        self.transport.handler = lambda document, variables: {"data": {"topTags": [
            tag_node("a", description="A"),
            tag_node("a", description="A"),
            None,
            {"id": "broken"},
            tag_node("b"),
        ]}}
        result = await self.tags.top(10)
        self.assertEqual([record["id"] for record in result], ["a", "b"])
        self.assertEqual(self.transport.calls[0][1], {"limit": 10})
        self.assertIn("a", self.tags)

    async def test_top_satisfies_pending_lookup(self):
        client = TwitchData(transport=self.transport, batch_delay=10)
        pending = client.tags.get("a")
        self.transport.handler = lambda document, variables: {"data": {"topTags": [tag_node("a", description="A")]}}
        await client.tags.top()
        self.assertEqual((await pending)["description"], "A")
        self.assertEqual([call[0] for call in self.transport.calls], [queries.TAGS_TOP])
        await client.aclose()

    async def test_top_bad_response(self):
        self.transport.handler = lambda document, variables: {"data": {"topTags": None}}
        self.assertEqual(await self.tags.top(), [])
        with self.assertRaises(TypeError):
            await self.tags.top(0)

    async def test_matching(self):
        self.transport.handler = lambda document, variables: {"data": {"searchLiveTags": [
            tag_node("a"), {"id": "bad"},
        ]}}
        result = await self.tags.matching("spe", category=33)
        self.assertEqual([record["id"] for record in result], ["a"])
        self.assertEqual(self.transport.calls[0][1], {"query": "spe", "categoryID": "33", "limit": 100})

    async def test_matching_empty(self):
        self.transport.handler = lambda document, variables: {"data": {"searchLiveTags": []}}
        self.assertEqual(await self.tags.matching("x"), [])

    async def test_languages_from_cached_tags(self):
        self.tags.memorize(tag_node("en", name="auto___lang_en", label="English", isLanguageTag=True))
        self.tags.memorize(tag_node("s"))
        self.assertEqual(self.tags.languages_from_tags(["en", "s", None]), ["en"])
        self.assertEqual(self.tags.languages_from_tags("en"), [])  # type: ignore[arg-type]

    async def test_languages_from_tags_refreshes_through_callback(self):
        self.transport.handler = content_tags(
            tag_node("en", name="auto___lang_en", label="English", isLanguageTag=True),
            tag_node("fr", name="auto___lang_fr", label="Francais", isLanguageTag=True),
            tag_node("s"),
        )
        results = []
        done = asyncio.Event()

        def callback(languages):
            results.append(languages)
            done.set()

        self.assertEqual(self.tags.languages_from_tags(["en", "fr", "s"], callback), [])
        await asyncio.wait_for(done.wait(), 1)
        await asyncio.sleep(0.05)
        self.assertEqual(results, [["en", "fr"]])
        self.assertEqual(len(self.transport.calls), 1)


if __name__ == "__main__":
    unittest.main()
