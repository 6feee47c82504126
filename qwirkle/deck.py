"""Tile bag utilities for Qwirkle."""

from __future__ import annotations

from collections import Counter
from random import Random
from typing import Iterable, List, Optional

from .tiles import ALL_FACES, Tile

COPIES_PER_FACE = 3
HAND_SIZE = 6


def build_bag(copies_per_face: int = COPIES_PER_FACE) -> List[Tile]:
    """Return the ordered bag: every face ``copies_per_face`` times (108 by default)."""
    return [face for face in ALL_FACES for _ in range(copies_per_face)]


def draw_tiles(bag: List[Tile], count: int, *, rng: Optional[Random] = None) -> List[Tile]:
    """Remove up to ``count`` random tiles from ``bag`` and return them.

    Draws fewer when the bag runs short.
    """
    if rng is None:
        rng = Random()
    drawn: List[Tile] = []
    for _ in range(min(count, len(bag))):
        index = rng.randrange(len(bag))
        bag[index], bag[-1] = bag[-1], bag[index]
        drawn.append(bag.pop())
    return drawn


def return_tiles(bag: List[Tile], tiles: Iterable[Tile]) -> None:
    bag.extend(tiles)


def face_counts(*groups: Iterable[Tile]) -> Counter:
    """Count faces across any number of tile collections."""
    counts: Counter = Counter()
    for group in groups:
        counts.update(group)
    return counts


def remove_from_hand(hand: Iterable[Tile], tiles: Iterable[Tile]) -> Optional[List[Tile]]:
    """Return ``hand`` minus ``tiles`` (multiset difference), or None if a tile is missing."""
    remaining = list(hand)
    for tile in tiles:
        try:
            remaining.remove(tile)
        except ValueError:
            return None
    return remaining
