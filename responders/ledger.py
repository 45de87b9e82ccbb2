"""
Usage ledger - per-term counts and last-used times, plus a message counter.
"""
from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

from core.brain import Brain
from core.constants import BrainKey
from core.utils import dt_to_iso, iso_to_dt, safe_int, utcnow


def term_usage_key(term_key: str) -> str:
    return f"{BrainKey.TERM_USAGE}:{term_key}"


def response_usage_key(term_key: str) -> str:
    return f"{BrainKey.RESPONSE_USAGE}:{term_key}"


class UsageLedger:
    def __init__(self, brain: Brain, clock: Callable[[], dt.datetime] = utcnow) -> None:
        self.brain = brain
        self.clock = clock

    async def increment_term_count(self, term_key: str) -> int:
        return await self.brain.increment_by(term_usage_key(term_key), 1)

    async def term_count(self, term_key: str) -> Optional[int]:
        return safe_int(await self.brain.get(term_usage_key(term_key)))

    async def increment_message_count(self) -> int:
        return await self.brain.increment_by(BrainKey.MESSAGE_COUNT, 1)

    async def message_count(self) -> Optional[int]:
        return safe_int(await self.brain.get(BrainKey.MESSAGE_COUNT))

    async def record_use(self, term_key: str) -> dt.datetime:
        now = self.clock()
        await self.brain.set(response_usage_key(term_key), dt_to_iso(now))
        return now

    async def last_used(self, term_key: str) -> Optional[dt.datetime]:
        return iso_to_dt(await self.brain.get(response_usage_key(term_key)))
