"""
Caching strategies for fetch-cache.

- readthrough: store first, upstream on a miss, populate in the background
- race: store and upstream concurrently, first usable answer wins
"""

from typing import Dict, Type

from .base import CachingStrategy
from .race import RaceStrategy
from .readthrough import ReadthroughStrategy

STRATEGY_TYPES: Dict[str, Type[CachingStrategy]] = {
    ReadthroughStrategy.name: ReadthroughStrategy,
    RaceStrategy.name: RaceStrategy,
}

__all__ = ["CachingStrategy", "RaceStrategy", "ReadthroughStrategy", "STRATEGY_TYPES"]
