"""
Seed resolution.

A configured seed of 0 means "pick a fresh seed for this run". Everything
else is used as-is so runs can be reproduced. Stage randomness itself lives in
per-stage AleaPRNG instances; nothing here keeps global state.
"""

import uuid
from typing import Dict, Mapping

import structlog

logger = structlog.get_logger()

MAX_RANDOM_SEED = 999999


def fresh_seed() -> int:
    """New seed in [1, MAX_RANDOM_SEED]."""
    return uuid.uuid4().int % MAX_RANDOM_SEED + 1


def resolve_seed(seed: int) -> int:
    return seed if seed != 0 else fresh_seed()


def resolve_seeds(seeds: Mapping[str, int]) -> Dict[str, int]:
    """
    Resolve every stage seed.

    Args:
        seeds: Stage name -> configured seed

    Returns:
        Stage name -> seed actually used (never 0)
    """
    resolved = {}
    for stage, seed in seeds.items():
        resolved[stage] = resolve_seed(seed)
        if seed == 0:
            logger.debug("Random seed chosen", stage=stage, seed=resolved[stage])
    return resolved
