"""
Term store - trigger/response records kept in brain buckets.

Records sharing a stem key live in one bucket (a brain set). Word-like terms
go to the stemmed namespace, everything else to the raw namespace. An
explicit index of bucket keys (per namespace, and per first stem) is kept
alongside the buckets so lookups never scan the key space.
"""
from __future__ import annotations

import logging
import random
import re
from typing import Optional

from core.brain import Brain
from core.constants import BrainKey, Namespace

from .errors import TrivialTermError
from .stemmer import Stemmer
from .types import Candidate, TermRecord

logger = logging.getLogger("reactbot.terms")

# At least one alphanumeric run of two or more characters
WORD_RE = re.compile(r"[^\W_]{2,}")


def looks_like_words(text: str) -> bool:
    return bool(WORD_RE.search(text or ""))


def index_key(namespace: str) -> str:
    return f"{BrainKey.TERM_INDEX}:{namespace}"


def prefix_key(stem: str) -> str:
    return f"{BrainKey.TERM_PREFIX}:{stem}"


class TermStore:
    """Bounded storage of TermRecords with uniform random eviction."""

    def __init__(
        self,
        brain: Brain,
        stemmer: Stemmer,
        store_size: int = 200,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.brain = brain
        self.stemmer = stemmer
        self.store_size = store_size
        self.rng = rng or random.Random()

    async def initialize(self) -> None:
        await self.rebuild_index()
        await self.enforce_bound()

    # ─── Records ──────────────────────────────────────────────────────────────

    def build_record(self, term: str, response: str) -> TermRecord:
        cleaned = (term or "").strip()
        if not cleaned:
            raise TrivialTermError(term)

        word_like = looks_like_words(cleaned)
        stems = tuple(self.stemmer.tokenize_and_stem(cleaned)) if word_like else ()
        if word_like and not stems:
            raise TrivialTermError(term)

        return TermRecord(
            term=cleaned,
            response=(response or "").strip(),
            stems=stems,
            stem_key=",".join(stems) if word_like else cleaned.lower(),
            word_like=word_like,
        )

    async def add(self, term: str, response: str) -> TermRecord:
        record = self.build_record(term, response)
        candidate = record.candidate

        await self.brain.add_to_set(candidate.bucket_key, record.to_member())
        await self._index_bucket(candidate)
        logger.info("Stored %r -> %r in %s", record.term, record.response, candidate.term_key)

        await self.enforce_bound()
        return record

    async def remove(self, record: TermRecord) -> bool:
        """Drop ``record`` from both namespaces' buckets for its key."""
        member = record.to_member()
        removed = False
        for namespace in Namespace.ALL:
            candidate = Candidate(namespace, record.stem_key)
            if await self.brain.remove_from_set(candidate.bucket_key, member):
                removed = True
            await self._unindex_if_empty(candidate)
        if removed:
            logger.info("Removed %r -> %r", record.term, record.response)
        return removed

    async def members(self, candidate: Candidate) -> list[TermRecord]:
        return [
            TermRecord.from_member(member)
            for member in await self.brain.set_members(candidate.bucket_key)
        ]

    async def random_record(self, candidate: Candidate) -> Optional[TermRecord]:
        members = await self.brain.set_members(candidate.bucket_key)
        if not members:
            return None
        return TermRecord.from_member(self.rng.choice(members))

    # ─── Size bound ───────────────────────────────────────────────────────────

    async def count(self) -> int:
        total = 0
        for bucket_key in await self.bucket_keys():
            total += await self.brain.set_size(bucket_key)
        return total

    async def enforce_bound(self) -> int:
        """
        Evict random records until at most ``store_size`` remain.

        Picks a random non-empty bucket, then a random record in it, so old
        and new records have the same odds. Returns the number evicted.
        """
        keys = await self.bucket_keys()
        sizes = [await self.brain.set_size(key) for key in keys]
        count = sum(sizes)
        if count <= self.store_size:
            return 0

        evicted = 0
        while count > self.store_size and keys:
            idx = self.rng.randrange(len(keys))
            bucket_key = keys[idx]
            members = await self.brain.set_members(bucket_key)
            if members:
                member = self.rng.choice(members)
                await self.brain.remove_from_set(bucket_key, member)
                logger.debug("Evicted %s from %s", member, bucket_key)
                sizes[idx] -= 1
                count -= 1
                evicted += 1
            if not members or sizes[idx] <= 0:
                del keys[idx]
                del sizes[idx]
                await self._unindex_if_empty(Candidate.from_bucket_key(bucket_key))

        logger.info("Evicted %d record(s) to stay within %d", evicted, self.store_size)
        return evicted

    # ─── Index ────────────────────────────────────────────────────────────────

    async def bucket_keys(self, namespace: Optional[str] = None) -> list[str]:
        namespaces = (namespace,) if namespace else Namespace.ALL
        keys: list[str] = []
        for name in namespaces:
            keys.extend(await self.brain.set_members(index_key(name)))
        return keys

    async def buckets_starting_with(self, stem: str) -> list[Candidate]:
        return [
            Candidate.from_bucket_key(bucket_key)
            for bucket_key in await self.brain.set_members(prefix_key(stem))
        ]

    async def all_term_sizes(self) -> dict[int, int]:
        """Map of stem count -> number of buckets with that many stems."""
        sizes: dict[int, int] = {}
        for bucket_key in await self.bucket_keys():
            size = len(Candidate.from_bucket_key(bucket_key).stems)
            sizes[size] = sizes.get(size, 0) + 1
        return sizes

    async def rebuild_index(self) -> None:
        """Recreate the bucket index from the bucket keys in the brain."""
        for namespace in Namespace.ALL:
            for bucket_key in await self.brain.set_members(index_key(namespace)):
                await self._unindex_if_empty(Candidate.from_bucket_key(bucket_key))

        bucket_keys = await self.brain.keys_matching(f"{BrainKey.TERMS}:*")
        for bucket_key in bucket_keys:
            candidate = Candidate.from_bucket_key(bucket_key)
            if candidate.namespace in Namespace.ALL:
                await self._index_bucket(candidate)
        logger.debug("Indexed %d bucket(s)", len(bucket_keys))

    async def _index_bucket(self, candidate: Candidate) -> None:
        await self.brain.add_to_set(index_key(candidate.namespace), candidate.bucket_key)
        if candidate.stems:
            await self.brain.add_to_set(prefix_key(candidate.stems[0]), candidate.bucket_key)

    async def _unindex_if_empty(self, candidate: Candidate) -> None:
        if await self.brain.exists(candidate.bucket_key):
            return
        await self.brain.remove_from_set(index_key(candidate.namespace), candidate.bucket_key)
        if candidate.stems:
            await self.brain.remove_from_set(prefix_key(candidate.stems[0]), candidate.bucket_key)
