"""
Key-value brain store.

Holds plain values and sets of strings in memory and persists them as one
JSON document. Writes are marked dirty and flushed eventually (periodically
by the bot, and on close).
"""
from __future__ import annotations

import asyncio
import fnmatch
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional

from .io_utils import read_json, write_json_atomic
from .utils import safe_int

logger = logging.getLogger("reactbot.brain")

SNAPSHOT_VERSION = 1


class StoreUnavailableError(RuntimeError):
    """The brain could not be read from or written to."""


class Brain:
    """
    Single-process key-value store.

    Values live in ``values``; sets of strings live in ``sets``. A key is
    either a value or a set, never both. Sets that become empty are
    removed, so ``exists`` is false for them.
    """

    def __init__(self, path: Optional[Path] = None, rng: Optional[random.Random] = None) -> None:
        self.path = path
        self.rng = rng or random.Random()
        self.values: Dict[str, Any] = {}
        self.sets: Dict[str, set[str]] = {}
        self.lock = asyncio.Lock()
        self.dirty = False
        self.closed = False

    # ─── Persistence ──────────────────────────────────────────────────────────

    async def load(self) -> None:
        """Replace in-memory contents with the snapshot on disk, if any."""
        self._check_open()
        if self.path is None:
            return
        try:
            data = await read_json(self.path, default=None)
        except (OSError, ValueError) as exc:
            raise StoreUnavailableError(f"Cannot read brain at {self.path}: {exc}") from exc
        if data is None:
            logger.info("No brain snapshot at %s, starting empty", self.path)
            return
        if not isinstance(data, dict):
            raise StoreUnavailableError(f"Brain snapshot at {self.path} must be a JSON object")

        values = data.get("values")
        sets = data.get("sets")
        async with self.lock:
            self.values = dict(values) if isinstance(values, dict) else {}
            self.sets = {
                key: {str(member) for member in members}
                for key, members in (sets.items() if isinstance(sets, dict) else [])
                if isinstance(members, list) and members
            }
            self.dirty = False
        logger.info(
            "Loaded brain from %s (%d values, %d sets)",
            self.path,
            len(self.values),
            len(self.sets),
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "v": SNAPSHOT_VERSION,
            "values": dict(self.values),
            "sets": {key: sorted(members) for key, members in self.sets.items()},
        }

    async def flush(self) -> bool:
        """Write the snapshot if anything changed. Returns True if written."""
        if self.path is None or not self.dirty:
            return False
        async with self.lock:
            data = self.snapshot()
            self.dirty = False
        try:
            await write_json_atomic(self.path, data)
        except (OSError, TypeError, ValueError) as exc:
            self.dirty = True
            raise StoreUnavailableError(f"Cannot write brain to {self.path}: {exc}") from exc
        logger.debug("Flushed brain to %s", self.path)
        return True

    async def close(self) -> None:
        if self.closed:
            return
        await self.flush()
        self.closed = True

    def _check_open(self) -> None:
        if self.closed:
            raise StoreUnavailableError("Brain is closed")

    def _touch(self) -> None:
        self.dirty = True

    # ─── Values ───────────────────────────────────────────────────────────────

    async def set(self, key: str, value: Any) -> None:
        self._check_open()
        self.sets.pop(key, None)
        self.values[key] = value
        self._touch()

    async def get(self, key: str) -> Any:
        self._check_open()
        return self.values.get(key)

    async def delete(self, key: str) -> bool:
        self._check_open()
        if key in self.values:
            del self.values[key]
        elif key in self.sets:
            del self.sets[key]
        else:
            return False
        self._touch()
        return True

    async def increment_by(self, key: str, amount: int) -> int:
        self._check_open()
        if key in self.sets:
            raise TypeError(f"{key} holds a set, not a number")
        current = safe_int(self.values.get(key), default=0) or 0
        current += amount
        self.values[key] = current
        self._touch()
        return current

    async def exists(self, key: str) -> bool:
        self._check_open()
        return key in self.values or key in self.sets

    async def keys_matching(self, pattern: str) -> List[str]:
        """Keys matching a glob pattern (``*``, ``?``, ``[...]``)."""
        self._check_open()
        keys = [*self.values.keys(), *self.sets.keys()]
        return sorted(key for key in keys if fnmatch.fnmatchcase(key, pattern))

    # ─── Sets ─────────────────────────────────────────────────────────────────

    def _set_for_write(self, key: str) -> set[str]:
        if key in self.values:
            raise TypeError(f"{key} holds a value, not a set")
        return self.sets.setdefault(key, set())

    async def add_to_set(self, key: str, member: str) -> bool:
        self._check_open()
        members = self._set_for_write(key)
        if member in members:
            return False
        members.add(member)
        self._touch()
        return True

    async def remove_from_set(self, key: str, member: str) -> bool:
        self._check_open()
        members = self.sets.get(key)
        if not members or member not in members:
            return False
        members.discard(member)
        if not members:
            del self.sets[key]
        self._touch()
        return True

    async def random_member(self, key: str) -> Optional[str]:
        self._check_open()
        members = self.sets.get(key)
        if not members:
            return None
        return self.rng.choice(sorted(members))

    async def set_size(self, key: str) -> int:
        self._check_open()
        return len(self.sets.get(key, ()))

    async def set_members(self, key: str) -> List[str]:
        self._check_open()
        return sorted(self.sets.get(key, ()))
