"""Tile maps and random dungeon generation with walkers and space partitioning."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

from grovecrawl.geometry import CardinalDir
from grovecrawl.rng import RandomSource

ROOM_SIZE = 35

WALKER_DIR_CHANGE_CHANCE = 0.5
WALKER_SPAWN_CHANCE = 0.05
WALKER_DESTROY_CHANCE = 0.05
MAX_WALKERS = 10
PERCENT_TO_FILL = 0.5

# N, E, S, W as (dx, dy)
_DIRECTIONS = ((0, 1), (1, 0), (0, -1), (-1, 0))
_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Tile(IntEnum):
    NONE = -1
    GRASS = 0
    TREE = 1
    PLAYER = 2


class _Row:
    """Writable view of one row of a map."""

    __slots__ = ("_tiles", "_offset", "_width")

    def __init__(self, tiles: list[Tile], offset: int, width: int) -> None:
        self._tiles = tiles
        self._offset = offset
        self._width = width

    def _check(self, column: int) -> None:
        if not 0 <= column < self._width:
            raise IndexError(f"column {column} outside 0..{self._width - 1}")

    def __getitem__(self, column: int) -> Tile:
        self._check(column)
        return self._tiles[self._offset + column]

    def __setitem__(self, column: int, tile: Tile) -> None:
        self._check(column)
        self._tiles[self._offset + column] = Tile(tile)

    def __len__(self) -> int:
        return self._width

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles[self._offset:self._offset + self._width])


class Map:
    """Grid of tiles indexed as ``tile_map[y][x]``."""

    def __init__(self, size_x: int = 0, size_y: int = 0) -> None:
        self.size_x = 0
        self.size_y = 0
        self.tiles: list[Tile] = []
        self.resize(size_x, size_y)

    def resize(self, size_x: int, size_y: int) -> None:
        """Change the dimensions; every tile becomes ``Tile.NONE``."""
        if size_x < 0 or size_y < 0:
            raise ValueError(f"map size must not be negative, got {size_x}x{size_y}")
        self.size_x = size_x
        self.size_y = size_y
        self.tiles = [Tile.NONE] * (size_x * size_y)

    def __getitem__(self, index: int) -> _Row:
        if not 0 <= index < self.size_y:
            raise IndexError(f"row {index} outside 0..{self.size_y - 1}")
        return _Row(self.tiles, index * self.size_x, self.size_x)

    def size(self) -> int:
        """Number of tiles."""
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def clear(self) -> None:
        self.tiles[:] = [Tile.NONE] * len(self.tiles)


@dataclass
class _Walker:
    x: int
    y: int
    dx: int
    dy: int

    @classmethod
    def spawn(cls, x: int, y: int, rng: RandomSource) -> _Walker:
        dx, dy = random_dir(rng)
        return cls(x, y, dx, dy)


@dataclass
class _SpaceNode:
    size_x: int
    size_y: int
    corner_x: int
    corner_y: int


def random_dir(rng: RandomSource) -> tuple[int, int]:
    """One of the four axis directions as ``(dx, dy)``."""
    return _DIRECTIONS[rng.uint_to(3)]


def insert_room(tile_map: Map, room: Map, corner: tuple[int, int]) -> None:
    """Copy ``room`` into ``tile_map`` with its first tile at ``corner`` (x, y)."""
    corner_x, corner_y = corner
    for i in range(room.size_y):
        target = tile_map[i + corner_y]
        source = room[i]
        for j in range(room.size_x):
            target[j + corner_x] = source[j]


def _surround_with_trees(tile_map: Map, rows: range, columns: range) -> None:
    for i in rows:
        for j in columns:
            if tile_map[i][j] != Tile.GRASS:
                continue
            for di, dj in _NEIGHBOURS:
                ni, nj = i + di, j + dj
                if 0 <= ni < tile_map.size_y and 0 <= nj < tile_map.size_x:
                    row = tile_map[ni]
                    if row[nj] == Tile.NONE:
                        row[nj] = Tile.TREE


def gen_test_map() -> Map:
    """25x25 field of grass fenced by trees."""
    tile_map = Map(25, 25)
    for i in range(tile_map.size_y):
        row = tile_map[i]
        for j in range(tile_map.size_x):
            border = i in (0, tile_map.size_y - 1) or j in (0, tile_map.size_x - 1)
            row[j] = Tile.TREE if border else Tile.GRASS
    return tile_map


def gen_room(start_x: int, start_y: int, size_x: int, size_y: int, rng: RandomSource) -> Map:
    """Carve a cave room with random walkers until more than half of it is grass."""
    if size_x < 3 or size_y < 3:
        raise ValueError(f"room must be at least 3x3, got {size_x}x{size_y}")
    if not (0 <= start_x < size_x and 0 <= start_y < size_y):
        raise ValueError(f"start ({start_x}, {start_y}) lies outside a {size_x}x{size_y} room")

    tile_map = Map(size_x, size_y)
    start = _Walker.spawn(start_x, start_y, rng)
    walkers = [start]

    tile_map[start.y][start.x] = Tile.GRASS
    if start.y == 0:
        start.y += 1
    elif start.y == size_y - 1:
        start.y -= 1
    tile_map[start.y][start.x] = Tile.GRASS
    if start.x == 0:
        start.x += 1
    elif start.x == size_x - 1:
        start.x -= 1

    total = tile_map.size()
    reachable = sum(
        1
        for i in range(1, size_y - 1)
        for j in range(1, size_x - 1)
        if tile_map[i][j] == Tile.NONE
    )
    if reachable / total <= PERCENT_TO_FILL:
        raise ValueError(f"a {size_x}x{size_y} room cannot be filled past {PERCENT_TO_FILL:.0%}")

    floor_count = 0
    while floor_count / total <= PERCENT_TO_FILL:
        for walker in walkers:
            row = tile_map[walker.y]
            if row[walker.x] == Tile.NONE:
                floor_count += 1
            row[walker.x] = Tile.GRASS

        for walker in walkers:
            walker.x = min(max(walker.x + walker.dx, 1), size_x - 2)
            walker.y = min(max(walker.y + walker.dy, 1), size_y - 2)

        for index in reversed(range(len(walkers))):
            if rng.unit_float() < WALKER_DESTROY_CHANCE and len(walkers) > 1:
                del walkers[index]

        for walker in walkers:
            if rng.unit_float() < WALKER_SPAWN_CHANCE and len(walkers) < MAX_WALKERS:
                walkers.append(_Walker.spawn(walker.x, walker.y, rng))
                break

        for walker in walkers:
            if rng.unit_float() < WALKER_DIR_CHANGE_CHANCE:
                walker.dx, walker.dy = random_dir(rng)

    _surround_with_trees(tile_map, range(size_y), range(size_x))
    return tile_map


_TILE_GLYPHS = {Tile.GRASS: " ", Tile.TREE: "T"}


def format_map(tile_map: Map) -> str:
    """Text picture of the map, two characters per tile, one line per row."""
    lines = []
    for i in range(tile_map.size_y):
        lines.append("".join(" " + _TILE_GLYPHS.get(tile, ",") for tile in tile_map[i]) + "\n")
    return "".join(lines)


def render_map(tile_map: Map) -> None:
    """Clear the terminal and print the map."""
    subprocess.run("cls" if os.name == "nt" else "clear", shell=True, check=False)
    print(format_map(tile_map), end="")


def _split_vertical(nodes: list[_SpaceNode], index: int, rng: RandomSource) -> None:
    node = nodes[index]
    ratio = rng.float_between(0.3, 0.7)
    lower = int(node.size_y * ratio)
    upper = node.size_y - lower + 1
    upper_corner = node.corner_y + lower - 1
    nodes[index] = _SpaceNode(node.size_x, lower, node.corner_x, node.corner_y)
    nodes.append(_SpaceNode(node.size_x, upper, node.corner_x, upper_corner))


def _split_horizontal(nodes: list[_SpaceNode], index: int, rng: RandomSource) -> None:
    node = nodes[index]
    ratio = rng.float_between(0.3, 0.7)
    left = int(node.size_x * ratio)
    right = node.size_x - left + 1
    right_corner = node.corner_x + left - 1
    nodes[index] = _SpaceNode(left, node.size_y, node.corner_x, node.corner_y)
    nodes.append(_SpaceNode(right, node.size_y, right_corner, node.corner_y))


def _partition(size_x: int, size_y: int, rng: RandomSource) -> list[_SpaceNode]:
    nodes = [_SpaceNode(size_x, size_y, 0, 0)]
    index = 0
    while index < len(nodes):
        node = nodes[index]
        if node.size_x <= ROOM_SIZE and node.size_y <= ROOM_SIZE:
            index += 1
        elif node.size_x <= ROOM_SIZE:
            _split_vertical(nodes, index, rng)
        elif node.size_y <= ROOM_SIZE:
            _split_horizontal(nodes, index, rng)
        elif rng.next_uint() % 2 == 0:
            _split_horizontal(nodes, index, rng)
        else:
            _split_vertical(nodes, index, rng)
    return nodes


def gen_map(size_x: int, size_y: int, rng: RandomSource) -> Map:
    """Generate a dungeon of rooms and mark one grass tile as the player spawn."""
    if size_x < 3 or size_y < 3:
        raise ValueError(f"map must be at least 3x3, got {size_x}x{size_y}")

    tile_map = Map(size_x, size_y)
    for node in _partition(size_x, size_y, rng):
        for i in range(node.corner_y, node.corner_y + node.size_y):
            row = tile_map[i]
            for j in range(node.corner_x, node.corner_x + node.size_x):
                if i in (0, size_y - 1) or j in (0, size_x - 1):
                    row[j] = Tile.TREE
                elif i in (node.corner_y, node.corner_y + node.size_y - 1) or j == node.corner_x:
                    row[j] = Tile.GRASS

        if node.corner_x > 0:
            node.corner_x += 1
        if node.corner_y > 0:
            node.corner_y += 1
        if node.corner_x + node.size_x >= size_x or node.corner_x == 0:
            node.size_x -= 1
        else:
            node.size_x -= 2
        if node.corner_y + node.size_y >= size_y or node.corner_y == 0:
            node.size_y -= 1
        else:
            node.size_y -= 2

        blocked = set()
        if node.corner_x == 0:
            blocked.add(CardinalDir.W)
        if node.corner_y == 0:
            blocked.add(CardinalDir.S)
        if node.corner_y + node.size_y == size_y:
            blocked.add(CardinalDir.N)
        if node.corner_x + node.size_x == size_x:
            blocked.add(CardinalDir.E)
        candidates = [d for d in (CardinalDir.N, CardinalDir.W, CardinalDir.E, CardinalDir.S)
                      if d not in blocked]
        direction = candidates[rng.uint_to(len(candidates) - 1)]

        if direction == CardinalDir.N:
            start_x, start_y = rng.uint_between(1, node.size_x - 2), node.size_y - 1
        elif direction == CardinalDir.S:
            start_x, start_y = rng.uint_between(1, node.size_x - 2), 0
        elif direction == CardinalDir.E:
            start_x, start_y = node.size_x - 1, rng.uint_between(1, node.size_y - 2)
        else:
            start_x, start_y = 0, rng.uint_between(1, node.size_y - 2)

        room = gen_room(start_x, start_y, node.size_x, node.size_y, rng)
        insert_room(tile_map, room, (node.corner_x, node.corner_y))

    _surround_with_trees(tile_map, range(1, size_y - 1), range(1, size_x - 1))

    x = rng.uint_between(1, size_x - 1)
    y = rng.uint_between(1, size_y - 1)
    while tile_map[y][x] != Tile.GRASS:
        x = rng.uint_between(1, size_x - 1)
        y = rng.uint_between(1, size_y - 1)
    tile_map[y][x] = Tile.PLAYER
    return tile_map