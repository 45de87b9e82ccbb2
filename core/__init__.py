"""
Core utilities and infrastructure for the bot.

This package contains:
- brain: Key-value store with JSON persistence
- config: Configuration loading and validation
- constants: Configuration keys and storage key names
- io_utils: File I/O helpers
- utils: General utilities
"""
from .constants import BrainKey, ConfigKey, K, Namespace

__all__ = [
    "BrainKey",
    "ConfigKey",
    "K",
    "Namespace",
]
