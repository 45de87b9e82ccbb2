"""
Errors raised by the reaction engine.
"""
from __future__ import annotations

from core.brain import StoreUnavailableError


class TrivialTermError(ValueError):
    """The term has no usable stems (or is empty)."""

    def __init__(self, term: str) -> None:
        super().__init__(f"Term {term!r} is too trivial")
        self.term = term


__all__ = ["StoreUnavailableError", "TrivialTermError"]
