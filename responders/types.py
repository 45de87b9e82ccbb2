"""
Dataclasses shared by the reaction engine components.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from core.constants import BrainKey, Namespace


@dataclass(frozen=True)
class TermRecord:
    """A stored (trigger term -> response) pair."""
    term: str
    response: str
    stems: tuple[str, ...]
    stem_key: str
    word_like: bool

    @property
    def namespace(self) -> str:
        return Namespace.STEMMED if self.word_like else Namespace.RAW

    @property
    def candidate(self) -> Candidate:
        return Candidate(self.namespace, self.stem_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "term": self.term,
            "response": self.response,
            "stems": list(self.stems),
            "stem_key": self.stem_key,
            "word_like": self.word_like,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TermRecord:
        return cls(
            term=str(data.get("term", "")),
            response=str(data.get("response", "")),
            stems=tuple(str(stem) for stem in data.get("stems") or ()),
            stem_key=str(data.get("stem_key", "")),
            word_like=bool(data.get("word_like", False)),
        )

    def to_member(self) -> str:
        """Canonical JSON form used as the brain set member."""
        return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=True)

    @classmethod
    def from_member(cls, member: str) -> TermRecord:
        return cls.from_dict(json.loads(member))


@dataclass(frozen=True)
class Candidate:
    """A bucket that matched an incoming message."""
    namespace: str
    key: str

    @property
    def term_key(self) -> str:
        return f"{self.namespace}:{self.key}"

    @property
    def bucket_key(self) -> str:
        return f"{BrainKey.TERMS}:{self.namespace}:{self.key}"

    @property
    def stems(self) -> tuple[str, ...]:
        if self.namespace != Namespace.STEMMED:
            return ()
        return tuple(self.key.split(","))

    @classmethod
    def from_bucket_key(cls, bucket_key: str) -> Candidate:
        _, namespace, key = bucket_key.split(":", 2)
        return cls(namespace, key)


@dataclass
class ReactionResult:
    """Outcome of an authoring command, with the text to send back."""
    text: str
    record: TermRecord | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None
