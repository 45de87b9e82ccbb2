"""
Configuration and storage key constants.

Using constants instead of string literals provides:
- IDE autocomplete
- Typo protection (caught at import time)
- Single source of truth for key names
"""
from __future__ import annotations


class ConfigKey:
    """Environment variables read by the bot."""

    # Identity
    BOT_TOKEN = "DISCORD_BOT_TOKEN"
    BOT_TOKEN_FALLBACK = "BOT_TOKEN"
    LOG_LEVEL = "LOG_LEVEL"

    # Term store
    STORE_SIZE = "STORE_SIZE"

    # Throttling
    THROTTLE_BASE_EXPIRATION_SECONDS = "THROTTLE_BASE_EXPIRATION_SECONDS"
    THROTTLE_FREQUENCY_MULTIPLIER = "THROTTLE_FREQUENCY_MULTIPLIER"

    # Persistence
    BRAIN_PATH = "BRAIN_PATH"
    BRAIN_FLUSH_INTERVAL_SECONDS = "BRAIN_FLUSH_INTERVAL_SECONDS"


class Namespace:
    """Bucket families for stored terms."""
    STEMMED = "stemmed"
    RAW = "raw"

    ALL = (STEMMED, RAW)


class BrainKey:
    """Key prefixes and fixed keys used in the brain."""

    # Buckets: terms:<namespace>:<stem_key>
    TERMS = "terms"
    # Bucket index: term-index:<namespace>
    TERM_INDEX = "term-index"
    # Stemmed buckets by first stem: term-prefix:<stem>
    TERM_PREFIX = "term-prefix"

    # Usage ledger
    TERM_USAGE = "term-usage"
    RESPONSE_USAGE = "response-usages"
    MESSAGE_COUNT = "message-count"


# Shorthand alias for cleaner imports
K = ConfigKey
