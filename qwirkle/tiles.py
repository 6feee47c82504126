"""Tile faces and helpers for Qwirkle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence


class Color(Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"

    def __str__(self) -> str:
        return self.value


class Shape(Enum):
    CIRCLE = "circle"
    CROSS = "cross"
    DIAMOND = "diamond"
    SQUARE = "square"
    STAR = "star"
    CLOVER = "clover"

    def __str__(self) -> str:
        return self.value


# Display symbols used by the ASCII board dump.
SHAPE_SYMBOLS: dict[Shape, str] = {
    Shape.CIRCLE: "o",
    Shape.CROSS: "x",
    Shape.DIAMOND: "d",
    Shape.SQUARE: "s",
    Shape.STAR: "*",
    Shape.CLOVER: "c",
}


COLOR_INDEX: dict[Color, int] = {color: index for index, color in enumerate(Color)}
SHAPE_INDEX: dict[Shape, int] = {shape: index for index, shape in enumerate(Shape)}


@dataclass(frozen=True)
class Tile:
    """Immutable tile face. Physical copies are indistinguishable."""

    color: Color
    shape: Shape

    def __str__(self) -> str:
        return f"{self.color.value}_{self.shape.value}"

    def sort_key(self) -> tuple[int, int]:
        return COLOR_INDEX[self.color], SHAPE_INDEX[self.shape]

    def shares_attribute(self, other: Tile) -> bool:
        return self.color is other.color or self.shape is other.shape


ALL_FACES: tuple[Tile, ...] = tuple(Tile(color, shape) for color in Color for shape in Shape)


def common_attribute(tiles: Sequence[Tile]) -> Optional[str]:
    """Return ``"color"`` or ``"shape"`` if every tile shares it, otherwise None.

    A single tile trivially shares both; colour is reported first.
    """
    if not tiles:
        return None
    first = tiles[0]
    if all(tile.color is first.color for tile in tiles):
        return "color"
    if all(tile.shape is first.shape for tile in tiles):
        return "shape"
    return None


def has_duplicate_faces(tiles: Iterable[Tile]) -> bool:
    seen: set[Tile] = set()
    for tile in tiles:
        if tile in seen:
            return True
        seen.add(tile)
    return False


def serialize_tile(tile: Tile) -> str:
    return str(tile)


def deserialize_tile(payload: str) -> Tile:
    """Parse ``"<color>_<shape>"``."""
    try:
        color_name, shape_name = payload.strip().lower().split("_", 1)
        return Tile(Color(color_name), Shape(shape_name))
    except ValueError as exc:
        raise ValueError(f"Unknown tile: {payload!r}") from exc


def deserialize_tiles(payload: Iterable[str]) -> List[Tile]:
    return [deserialize_tile(item) for item in payload]


def tile_label(tile: Tile) -> str:
    return f"{tile.color.value.title()} {tile.shape.value.title()}"


def tile_symbol(tile: Tile) -> str:
    return f"{tile.color.value[0].upper()}{SHAPE_SYMBOLS[tile.shape]}"
