"""
Reaction engine - main entry point and orchestration.

This module ties together the term store, matcher, throttle policy and
usage ledger. One engine instance owns all reaction state, including the
last response it emitted.
"""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
import random
from typing import Callable, Optional

from core.brain import Brain
from core.config import ReactConfig
from core.utils import utcnow

from . import messages
from .errors import StoreUnavailableError, TrivialTermError
from .ledger import UsageLedger
from .matching import Matcher
from .stemmer import Stemmer
from .term_store import TermStore
from .throttle import ThrottlePolicy
from .types import ReactionResult, TermRecord

logger = logging.getLogger("reactbot.engine")


class ReactionEngine:
    """
    Reacts to chat text with trained responses.

    Every operation runs under one lock, so a message is fully processed
    (matching, counting, throttling, recording) before the next starts.
    """

    def __init__(
        self,
        brain: Brain,
        config: Optional[ReactConfig] = None,
        stemmer: Optional[Stemmer] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        config = config or ReactConfig()
        self.brain = brain
        self.rng = rng or random.Random()
        self.stemmer = stemmer or Stemmer()
        self.store = TermStore(brain, self.stemmer, config.store_size, self.rng)
        self.ledger = UsageLedger(brain, clock)
        self.matcher = Matcher(self.store, self.stemmer)
        self.throttle = ThrottlePolicy(
            self.ledger,
            base_expiration=config.throttle_base_expiration,
            frequency_multiplier=config.throttle_frequency_multiplier,
            clock=clock,
        )
        self.last_used: Optional[TermRecord] = None
        self.lock = asyncio.Lock()

    async def initialize(self) -> None:
        async with self.lock:
            await self.store.initialize()

    # ─── Passive reactions ────────────────────────────────────────────────────

    async def react(self, text: str) -> Optional[str]:
        """
        Pick a response for ``text``, or None.

        Store failures are logged and swallowed so a broken brain never
        produces a reply.
        """
        async with self.lock:
            try:
                return await self._react(text)
            except StoreUnavailableError as exc:
                logger.warning("Skipping reaction, store unavailable: %s", exc)
                return None

    async def _react(self, text: str) -> Optional[str]:
        candidates = await self.matcher.search(text)

        # Count appearances before filtering; feeds the throttle decay
        for candidate in candidates:
            await self.ledger.increment_term_count(candidate.term_key)

        survivors = []
        for candidate in candidates:
            if await self.throttle.should_throttle(candidate.term_key):
                logger.debug("Throttled %s", candidate.term_key)
                continue
            survivors.append(candidate)

        record: Optional[TermRecord] = None
        if survivors:
            candidate = self.rng.choice(survivors)
            record = await self.store.random_record(candidate)

        if record is not None:
            self.last_used = record
            await self.ledger.record_use(record.candidate.term_key)
            logger.info("Reacting to %r with %r", record.term, record.response)

        await self.ledger.increment_message_count()
        return record.response if record is not None else None

    # ─── Authoring ────────────────────────────────────────────────────────────

    async def train(self, term: str, response: str) -> ReactionResult:
        """Store a new pair. StoreUnavailableError propagates."""
        async with self.lock:
            try:
                record = await self.store.add(term, response)
            except TrivialTermError as exc:
                logger.info("Rejected trivial term %r", exc.term)
                return ReactionResult(messages.trivial_message(exc.term), error="trivial")
        return ReactionResult(messages.success_message(record), record=record)

    async def undo_last(self) -> ReactionResult:
        """Forget the last emitted pair. StoreUnavailableError propagates."""
        async with self.lock:
            record = self.last_used
            if record is None:
                return ReactionResult(messages.not_found_message(self.rng), error="nothing to undo")
            removed = await self.store.remove(record)
            self.last_used = None
        if not removed:
            # Evicted since it was used
            return ReactionResult(messages.not_found_message(self.rng), error="already forgotten")
        return ReactionResult(messages.ignored_message(record), record=record)

    def what_was_that(self) -> ReactionResult:
        record = self.last_used
        if record is None:
            return ReactionResult(messages.not_found_message(self.rng), error="nothing remembered")
        return ReactionResult(messages.what_message(record), record=record)
