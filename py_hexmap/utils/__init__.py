"""
Utility helpers.
"""

from .logging import configure_logging
from .random import fresh_seed, resolve_seed, resolve_seeds

__all__ = ["configure_logging", "fresh_seed", "resolve_seed", "resolve_seeds"]
