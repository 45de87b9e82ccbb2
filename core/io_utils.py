from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any


async def read_json(path: Path, default: Any = None) -> Any:
    """Load JSON from ``path``; ``default`` if the file does not exist."""
    def _read() -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return default

    return await asyncio.to_thread(_read)


async def write_json_atomic(path: Path, data: Any, *, sort_keys: bool = True) -> None:
    """Write through a temp file renamed over ``path``."""
    def _write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=True, indent=2, sort_keys=sort_keys)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    await asyncio.to_thread(_write)
