"""Bot package - Discord client."""
from .client import ReactBot

__all__ = ["ReactBot"]
