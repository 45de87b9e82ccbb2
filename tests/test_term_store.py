"""Tests for the term store: classification, buckets, eviction."""
import asyncio
import random

import pytest

from core.constants import Namespace
from responders import TermStore, TrivialTermError
from responders.term_store import index_key, looks_like_words
from responders.types import Candidate


class TestLooksLikeWords:
    def test_words(self):
        assert looks_like_words("hello")
        assert looks_like_words("foo bar")
        assert looks_like_words("hello!")

    def test_not_words(self):
        assert not looks_like_words("!!!")
        assert not looks_like_words(":)")
        assert not looks_like_words("a")
        assert not looks_like_words("")


class TestAdd:
    def test_word_term_is_stemmed(self, store):
        async def scenario():
            record = await store.add("Running", "go go go")
            assert record.word_like
            assert record.stems == ("run",)
            assert record.stem_key == "run"
            assert record.namespace == Namespace.STEMMED
            assert await store.bucket_keys(Namespace.STEMMED) == ["terms:stemmed:run"]

        asyncio.run(scenario())

    def test_multi_word_key_is_comma_joined(self, store):
        async def scenario():
            record = await store.add("foo bar", "baz")
            assert record.stem_key == "foo,bar"
            assert [c.key for c in await store.buckets_starting_with("foo")] == ["foo,bar"]

        asyncio.run(scenario())

    def test_non_word_term_goes_to_raw_bucket(self, store):
        async def scenario():
            record = await store.add("!!!", "x")
            assert not record.word_like
            assert record.stems == ()
            assert record.stem_key == "!!!"
            assert await store.bucket_keys(Namespace.RAW) == ["terms:raw:!!!"]

        asyncio.run(scenario())

    def test_raw_key_is_lowercased(self, store):
        async def scenario():
            record = await store.add("X-D", "lol")
            assert record.stem_key == "x-d"

        asyncio.run(scenario())

    @pytest.mark.parametrize("term", ["", "   ", "the", "and the of"])
    def test_trivial_terms_rejected(self, store, term):
        async def scenario():
            with pytest.raises(TrivialTermError) as info:
                await store.add(term, "x")
            assert info.value.term == term
            assert await store.count() == 0

        asyncio.run(scenario())

    def test_same_term_multiple_responses_share_bucket(self, store):
        async def scenario():
            await store.add("hello", "hi")
            await store.add("hello", "hey")
            await store.add("hello", "hi")
            members = await store.members(Candidate(Namespace.STEMMED, "hello"))
            assert sorted(r.response for r in members) == ["hey", "hi"]
            assert await store.count() == 2

        asyncio.run(scenario())


class TestRemove:
    def test_remove_is_idempotent(self, store):
        async def scenario():
            record = await store.add("hello", "hi")
            assert await store.remove(record)
            assert not await store.remove(record)
            assert await store.count() == 0

        asyncio.run(scenario())

    def test_remove_cleans_index(self, store):
        async def scenario():
            record = await store.add("foo bar", "baz")
            await store.remove(record)
            assert await store.bucket_keys() == []
            assert await store.buckets_starting_with("foo") == []

        asyncio.run(scenario())

    def test_remove_keeps_other_responses(self, store):
        async def scenario():
            first = await store.add("hello", "hi")
            await store.add("hello", "hey")
            await store.remove(first)
            members = await store.members(first.candidate)
            assert [r.response for r in members] == ["hey"]

        asyncio.run(scenario())


class TestBound:
    @pytest.mark.parametrize("added", [3, 5, 12, 40])
    def test_count_is_min_of_size_and_added(self, brain, stemmer, added):
        store = TermStore(brain, stemmer, store_size=5, rng=random.Random(7))

        async def scenario():
            for i in range(added):
                await store.add(f"term{i}", f"response {i}")
            assert await store.count() == min(5, added)

        asyncio.run(scenario())

    def test_enforce_bound_after_shrinking(self, brain, stemmer):
        async def scenario():
            store = TermStore(brain, stemmer, store_size=50, rng=random.Random(3))
            for i in range(20):
                await store.add("hello", f"response {i}")
            for i in range(10):
                await store.add(f"word{i}", "x")
            store.store_size = 8
            assert await store.enforce_bound() == 22
            assert await store.count() == 8
            assert await store.enforce_bound() == 0

        asyncio.run(scenario())

    def test_emptied_buckets_leave_index(self, brain, stemmer):
        async def scenario():
            store = TermStore(brain, stemmer, store_size=1, rng=random.Random(11))
            for i in range(6):
                await store.add(f"term{i}", "x")
            keys = await store.bucket_keys()
            assert len(keys) == 1
            assert await brain.exists(keys[0])

        asyncio.run(scenario())


class TestIndex:
    def test_all_term_sizes(self, store):
        async def scenario():
            await store.add("hello", "hi")
            await store.add("goodbye", "bye")
            await store.add("foo bar", "baz")
            await store.add("!!!", "x")
            assert await store.all_term_sizes() == {1: 2, 2: 1, 0: 1}

        asyncio.run(scenario())

    def test_rebuild_index_from_buckets(self, brain, store):
        async def scenario():
            await store.add("foo bar", "baz")
            await store.add("!!!", "x")
            await brain.delete(index_key(Namespace.STEMMED))
            await brain.delete(index_key(Namespace.RAW))
            await brain.delete("term-prefix:foo")
            assert await store.bucket_keys() == []

            await store.rebuild_index()
            assert sorted(await store.bucket_keys()) == ["terms:raw:!!!", "terms:stemmed:foo,bar"]
            assert [c.key for c in await store.buckets_starting_with("foo")] == ["foo,bar"]

        asyncio.run(scenario())

    def test_rebuild_index_drops_stale_entries(self, brain, store):
        async def scenario():
            await brain.add_to_set(index_key(Namespace.STEMMED), "terms:stemmed:ghost")
            await brain.add_to_set("term-prefix:ghost", "terms:stemmed:ghost")
            await store.rebuild_index()
            assert await store.bucket_keys() == []
            assert await store.buckets_starting_with("ghost") == []

        asyncio.run(scenario())
