"""
Reply text produced by the reaction engine.
"""
from __future__ import annotations

import random
from typing import Optional

from .types import TermRecord

SUCCESS_TEMPLATE = "Reacting to {term} with {response}"
TRIVIAL_TEMPLATE = '"{term}" is too trivial.'
IGNORED_TEMPLATE = "No longer reacting to {term} with {response}"
WHAT_TEMPLATE = 'That was "{response}", triggered by something like "{term}"'
NOT_FOUND_MESSAGES = ("Wat.", "I didn't say nothin'")
STORE_UNAVAILABLE_MESSAGE = "My memory is unavailable right now, try again later."


def success_message(record: TermRecord) -> str:
    return SUCCESS_TEMPLATE.format(term=record.term, response=record.response)


def trivial_message(term: str) -> str:
    return TRIVIAL_TEMPLATE.format(term=term)


def ignored_message(record: TermRecord) -> str:
    return IGNORED_TEMPLATE.format(term=record.term, response=record.response)


def what_message(record: TermRecord) -> str:
    return WHAT_TEMPLATE.format(term=record.term, response=record.response)


def not_found_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(NOT_FOUND_MESSAGES)
