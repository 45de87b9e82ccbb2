"""
General utility functions.

Provides date/time helpers, text sanitization and lenient number parsing.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

UTC = dt.timezone.utc

CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def utcnow() -> dt.datetime:
    return dt.datetime.now(tz=UTC)


def dt_to_iso(value: Optional[dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    value = value.astimezone(UTC).replace(microsecond=0)
    return value.isoformat().replace("+00:00", "Z")


def iso_to_dt(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    # Naive timestamps are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def sanitize_text(text: Any, max_len: int = 1500) -> str:
    if text is None:
        return ""
    text = str(text)
    text = CONTROL_RE.sub("", text)
    if len(text) > max_len:
        text = text[: max_len - 3] + "..."
    return text


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            try:
                return int(stripped)
            except ValueError:
                return default
    return default


def safe_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default
