"""
Frequency-decayed throttling of responses.

A term that has fired recently is suppressed for a cooldown that grows with
how often the term shows up relative to all traffic:

    multiplier = F ** ((total + term) / total) - F / 2
    cooldown   = round(BASE * multiplier)
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional

from core.utils import utcnow

from .errors import StoreUnavailableError
from .ledger import UsageLedger

logger = logging.getLogger("reactbot.throttle")

DEFAULT_BASE_EXPIRATION = 300
DEFAULT_FREQUENCY_MULTIPLIER = 2.0


def cooldown_seconds(
    term_count: Optional[int],
    total_count: Optional[int],
    base_expiration: int = DEFAULT_BASE_EXPIRATION,
    frequency_multiplier: float = DEFAULT_FREQUENCY_MULTIPLIER,
) -> int:
    term = term_count if term_count and term_count > 0 else 0
    total = total_count if total_count and total_count > 0 else 1
    multiplier = pow(frequency_multiplier, (total + term) / total) - frequency_multiplier / 2
    return round(base_expiration * multiplier)


class ThrottlePolicy:
    def __init__(
        self,
        ledger: UsageLedger,
        base_expiration: int = DEFAULT_BASE_EXPIRATION,
        frequency_multiplier: float = DEFAULT_FREQUENCY_MULTIPLIER,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self.ledger = ledger
        self.base_expiration = base_expiration
        self.frequency_multiplier = frequency_multiplier
        self.clock = clock

    def cooldown_for(self, term_count: Optional[int], total_count: Optional[int]) -> int:
        return cooldown_seconds(
            term_count,
            total_count,
            self.base_expiration,
            self.frequency_multiplier,
        )

    async def should_throttle(self, term_key: str) -> bool:
        """True while ``term_key`` is inside its cooldown. Fails open."""
        try:
            last_used = await self.ledger.last_used(term_key)
            if last_used is None:
                return False
            term_count = await self.ledger.term_count(term_key)
            total_count = await self.ledger.message_count()
        except (StoreUnavailableError, TypeError, ValueError) as exc:
            logger.debug("Throttle lookup for %s failed, not throttling: %s", term_key, exc)
            return False

        try:
            cooldown = self.cooldown_for(term_count, total_count)
            expires = last_used + dt.timedelta(seconds=cooldown)
        except OverflowError:
            # Cooldown beyond datetime range
            return True

        try:
            return expires > self.clock()
        except TypeError as exc:
            logger.debug("Cannot compare last use of %s, not throttling: %s", term_key, exc)
            return False
