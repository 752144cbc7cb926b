"""
Deck Builder - Turns a catalog of N items into a shuffled board of 2N tiles.

This module handles:
- Catalog validation (non-empty, unique pair keys)
- Pair duplication
- Fisher-Yates shuffling with an injected random source
- Position assignment (final index after the shuffle)

The random source only has to provide randrange(); pass a seeded
random.Random for reproducible boards.
"""

from __future__ import annotations
import random
from typing import Sequence, TypeVar

from ..errors import DuplicatePairKeyError, EmptyCatalogError
from .state import Item, Tile

T = TypeVar("T")


def validate_catalog(catalog: Sequence[Item]) -> None:
    """Raise if the catalog cannot produce a valid board."""
    if not catalog:
        raise EmptyCatalogError()

    seen: set[str] = set()
    for item in catalog:
        if item.pair_key in seen:
            raise DuplicatePairKeyError(item.pair_key)
        seen.add(item.pair_key)


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a shuffled copy of items (Fisher-Yates).

    Walks the working copy from the last index down to 1, swapping each
    element with one drawn uniformly from [0, i]. Uniform over all
    permutations given a uniform source; the input is left untouched.
    """
    rng = rng or random.Random()
    working = list(items)
    for i in range(len(working) - 1, 0, -1):
        j = rng.randrange(i + 1)
        working[i], working[j] = working[j], working[i]
    return working


def build_deck(catalog: Sequence[Item], rng: random.Random | None = None) -> tuple[Tile, ...]:
    """
    Build a shuffled board with exactly two tiles per catalog item.

    Args:
        catalog: Distinct items to pair up
        rng: Random source for the shuffle (fresh unseeded Random if omitted)

    Returns:
        Tiles whose positions are exactly 0..2N-1, in board order
    """
    validate_catalog(catalog)

    pairs = [item for item in catalog for _ in range(2)]
    shuffled = shuffle(pairs, rng)

    return tuple(Tile.from_item(position, item) for position, item in enumerate(shuffled))
