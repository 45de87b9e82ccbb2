"""Shared fixtures: in-memory brain, seeded randomness, fixed clock."""
from __future__ import annotations

import datetime as dt
import random

import pytest

from core.brain import Brain
from core.config import ReactConfig
from core.utils import UTC
from responders import Matcher, ReactionEngine, Stemmer, TermStore
from responders.ledger import UsageLedger
from responders.throttle import ThrottlePolicy


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: dt.datetime | None = None) -> None:
        self.now = start or dt.datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += dt.timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def brain(rng):
    return Brain(rng=rng)


@pytest.fixture
def stemmer():
    return Stemmer()


@pytest.fixture
def store(brain, stemmer, rng):
    return TermStore(brain, stemmer, store_size=200, rng=rng)


@pytest.fixture
def matcher(store, stemmer):
    return Matcher(store, stemmer)


@pytest.fixture
def ledger(brain, clock):
    return UsageLedger(brain, clock)


@pytest.fixture
def throttle(ledger, clock):
    return ThrottlePolicy(ledger, base_expiration=300, frequency_multiplier=2.0, clock=clock)


@pytest.fixture
def engine(brain, stemmer, rng, clock):
    return ReactionEngine(brain, ReactConfig(), stemmer=stemmer, rng=rng, clock=clock)
