"""Sparse board representation for Qwirkle."""

from __future__ import annotations

from collections import ChainMap
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, MutableMapping, Optional, Set, Tuple

from .errors import Reason, RuleViolation
from .tiles import Tile, tile_symbol

Position = Tuple[int, int]
Placement = Tuple[Position, Tile]

ORIGIN: Position = (0, 0)
MAX_LINE_LENGTH = 6
NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Axis(Enum):
    HORIZONTAL = (1, 0)
    VERTICAL = (0, 1)

    @property
    def step(self) -> Position:
        return self.value

    def __str__(self) -> str:
        return self.name.lower()


class Board:
    """Mapping of positions to tiles on an unbounded grid.

    ``with_tiles`` returns a scratch board layered over this one; writes to
    the scratch board never reach the original.
    """

    def __init__(self, tiles: Optional[Mapping[Position, Tile]] = None) -> None:
        self._tiles: MutableMapping[Position, Tile] = dict(tiles or {})

    @classmethod
    def _layered(cls, tiles: MutableMapping[Position, Tile]) -> "Board":
        board = cls.__new__(cls)
        board._tiles = tiles
        return board

    # Queries -----------------------------------------------------------

    def tile_at(self, pos: Position) -> Optional[Tile]:
        return self._tiles.get(pos)

    def is_empty(self) -> bool:
        return len(self._tiles) == 0

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, pos: object) -> bool:
        return pos in self._tiles

    def __iter__(self) -> Iterator[Position]:
        return iter(self._tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return dict(self._tiles) == dict(other._tiles)

    def __repr__(self) -> str:
        return f"Board({len(self)} tiles)"

    def tiles(self) -> List[Placement]:
        """Return every placement ordered by row, then column."""
        return sorted(self._tiles.items(), key=lambda item: (item[0][1], item[0][0]))

    def as_dict(self) -> Dict[Position, Tile]:
        return dict(self._tiles)

    def neighbors(self, pos: Position) -> List[Position]:
        x, y = pos
        return [(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS]

    def has_neighbor(self, pos: Position) -> bool:
        return any(neighbor in self._tiles for neighbor in self.neighbors(pos))

    def line(self, pos: Position, axis: Axis) -> Tuple[Tile, ...]:
        """Tiles contiguous to ``pos`` along ``axis``, excluding ``pos`` itself.

        Ordered from the low end of the axis to the high end.
        """
        dx, dy = axis.step
        x, y = pos

        before: List[Tile] = []
        cx, cy = x - dx, y - dy
        while (cx, cy) in self._tiles:
            before.append(self._tiles[(cx, cy)])
            cx, cy = cx - dx, cy - dy
        before.reverse()

        after: List[Tile] = []
        cx, cy = x + dx, y + dy
        while (cx, cy) in self._tiles:
            after.append(self._tiles[(cx, cy)])
            cx, cy = cx + dx, cy + dy

        return tuple(before + after)

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Return ``(min_x, min_y, max_x, max_y)`` of occupied cells."""
        if self.is_empty():
            return None
        xs = [x for x, _ in self._tiles]
        ys = [y for _, y in self._tiles]
        return min(xs), min(ys), max(xs), max(ys)

    def possible_positions(self) -> Set[Position]:
        """Empty cells touching the current layout, bounded by the bounding box plus one."""
        if self.is_empty():
            return {ORIGIN}
        bounds = self.bounds()
        assert bounds is not None
        min_x, min_y, max_x, max_y = bounds

        positions: Set[Position] = set()
        for pos in self._tiles:
            for nx, ny in self.neighbors(pos):
                if nx < min_x - 1 or nx > max_x + 1 or ny < min_y - 1 or ny > max_y + 1:
                    continue
                if (nx, ny) not in self._tiles:
                    positions.add((nx, ny))
        return positions

    # Mutation ----------------------------------------------------------

    def place(self, pos: Position, tile: Tile) -> None:
        if pos in self._tiles:
            raise RuleViolation(Reason.CELL_OCCUPIED, f"Position {pos} is already occupied.")
        self._tiles[pos] = tile

    def with_tiles(self, placements: Iterable[Placement]) -> "Board":
        """Return a scratch board with ``placements`` applied on top of this one."""
        scratch = Board._layered(ChainMap({}, self._tiles))
        for pos, tile in placements:
            scratch.place(pos, tile)
        return scratch

    def copy(self) -> "Board":
        return Board(self._tiles)

    # Display -----------------------------------------------------------

    def render(self) -> str:
        """ASCII dump of the occupied area, one two-character cell per tile."""
        bounds = self.bounds()
        if bounds is None:
            return "(empty board)"
        min_x, min_y, max_x, max_y = bounds
        rows: List[str] = []
        for y in range(min_y, max_y + 1):
            cells = []
            for x in range(min_x, max_x + 1):
                tile = self._tiles.get((x, y))
                cells.append(tile_symbol(tile) if tile else "..")
            rows.append(" ".join(cells))
        return "\n".join(rows)
