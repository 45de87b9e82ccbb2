"""
Reaction system - split into focused modules.

This package stores trigger/response pairs and reacts to chat text with them.
"""
from .engine import ReactionEngine
from .errors import StoreUnavailableError, TrivialTermError
from .matching import Matcher
from .stemmer import Stemmer
from .term_store import TermStore
from .throttle import ThrottlePolicy
from .types import Candidate, ReactionResult, TermRecord

__all__ = [
    "ReactionEngine",
    "Matcher",
    "Stemmer",
    "TermStore",
    "ThrottlePolicy",
    "Candidate",
    "ReactionResult",
    "TermRecord",
    "StoreUnavailableError",
    "TrivialTermError",
]
