"""
Trigger matching for incoming chat text.

Two independent passes:
- stemmed: every position of the message's stem sequence is tried as the
  start of each stored stem sequence beginning with that stem
- raw: every stored non-word term that is a substring of the message
"""
from __future__ import annotations

import logging

from core.constants import Namespace

from .stemmer import Stemmer
from .term_store import TermStore, looks_like_words
from .types import Candidate

logger = logging.getLogger("reactbot.matcher")


def stems_match_at(text_stems: list[str], term_stems: tuple[str, ...], start: int) -> bool:
    """True if ``term_stems`` appears contiguously in ``text_stems`` at ``start``."""
    if not term_stems or len(term_stems) > len(text_stems) - start:
        return False
    return tuple(text_stems[start:start + len(term_stems)]) == term_stems


class Matcher:
    def __init__(self, store: TermStore, stemmer: Stemmer) -> None:
        self.store = store
        self.stemmer = stemmer

    async def search(self, text: str) -> list[Candidate]:
        """Return every stored bucket triggered by ``text``, without duplicates."""
        lowered = (text or "").lower()
        found: dict[Candidate, None] = {}

        if looks_like_words(lowered):
            for candidate in await self._search_stemmed(lowered):
                found.setdefault(candidate, None)

        for candidate in await self._search_raw(lowered):
            found.setdefault(candidate, None)

        if found:
            logger.debug("%d candidate(s) for %r", len(found), text)
        return list(found)

    async def _search_stemmed(self, lowered: str) -> list[Candidate]:
        term_sizes = await self.store.all_term_sizes()
        if not any(size > 0 and count > 0 for size, count in term_sizes.items()):
            return []

        stems = self.stemmer.tokenize_and_stem(lowered)
        results: list[Candidate] = []
        prefixes: dict[str, list[Candidate]] = {}

        for start, stem in enumerate(stems):
            if stem not in prefixes:
                prefixes[stem] = await self.store.buckets_starting_with(stem)
            for candidate in prefixes[stem]:
                if candidate.namespace != Namespace.STEMMED:
                    continue
                if stems_match_at(stems, candidate.stems, start):
                    results.append(candidate)
        return results

    async def _search_raw(self, lowered: str) -> list[Candidate]:
        results: list[Candidate] = []
        for bucket_key in await self.store.bucket_keys(Namespace.RAW):
            candidate = Candidate.from_bucket_key(bucket_key)
            if candidate.key and candidate.key in lowered:
                results.append(candidate)
        return results
