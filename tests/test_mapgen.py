from unittest import mock

import pytest

from grovecrawl.mapgen import (
    Map,
    Tile,
    format_map,
    gen_map,
    gen_room,
    gen_test_map,
    insert_room,
    random_dir,
    render_map,
)
from grovecrawl.rng import RandomSource

NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _grass_is_fenced(tile_map, rows, columns):
    for i in rows:
        for j in columns:
            if tile_map[i][j] not in (Tile.GRASS, Tile.PLAYER):
                continue
            for di, dj in NEIGHBOURS:
                ni, nj = i + di, j + dj
                if 0 <= ni < tile_map.size_y and 0 <= nj < tile_map.size_x:
                    if tile_map[ni][nj] == Tile.NONE:
                        return False
    return True


def test_new_map_is_empty():
    tile_map = Map(4, 3)
    assert tile_map.size() == 12
    assert all(tile == Tile.NONE for tile in tile_map)


def test_row_indexing_writes_the_right_tile():
    tile_map = Map(4, 3)
    tile_map[2][1] = Tile.TREE
    assert tile_map.tiles[2 * 4 + 1] == Tile.TREE
    assert tile_map[2][1] == Tile.TREE
    assert list(tile_map[1]) == [Tile.NONE] * 4


def test_out_of_range_indices_raise():
    tile_map = Map(2, 2)
    with pytest.raises(IndexError):
        _ = tile_map[2]
    with pytest.raises(IndexError):
        _ = tile_map[0][2]
    with pytest.raises(IndexError):
        _ = tile_map[-1]
    assert list(tile_map[1]) == [Tile.NONE, Tile.NONE]
    assert tile_map.size() == 4


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Map(-1, 3)


def test_resize_and_clear_reset_tiles():
    tile_map = Map(2, 2)
    tile_map[0][0] = Tile.GRASS
    tile_map.clear()
    assert all(tile == Tile.NONE for tile in tile_map)
    tile_map[1][1] = Tile.TREE
    tile_map.resize(5, 1)
    assert (tile_map.size_x, tile_map.size_y, tile_map.size()) == (5, 1, 5)
    assert all(tile == Tile.NONE for tile in tile_map)


def test_random_dir_yields_all_four_unit_steps():
    rng = RandomSource(3)
    seen = {random_dir(rng) for _ in range(200)}
    assert seen == {(0, 1), (1, 0), (0, -1), (-1, 0)}


def test_insert_room_copies_at_corner():
    tile_map = Map(5, 5)
    room = Map(2, 2)
    room[0][0] = Tile.GRASS
    room[1][1] = Tile.TREE
    insert_room(tile_map, room, (2, 3))
    assert tile_map[3][2] == Tile.GRASS
    assert tile_map[4][3] == Tile.TREE
    assert sum(tile != Tile.NONE for tile in tile_map) == 2


def test_gen_test_map_is_fenced_grass():
    tile_map = gen_test_map()
    assert (tile_map.size_x, tile_map.size_y) == (25, 25)
    for i in range(25):
        for j in range(25):
            border = i in (0, 24) or j in (0, 24)
            assert tile_map[i][j] == (Tile.TREE if border else Tile.GRASS)


def test_gen_room_fills_more_than_half():
    tile_map = gen_room(0, 5, 12, 10, RandomSource(11))
    grass = sum(tile == Tile.GRASS for tile in tile_map)
    assert grass / tile_map.size() > 0.5
    assert _grass_is_fenced(tile_map, range(10), range(12))


def test_gen_room_is_deterministic_for_a_seed():
    first = gen_room(4, 0, 15, 15, RandomSource(42))
    second = gen_room(4, 0, 15, 15, RandomSource(42))
    assert first.tiles == second.tiles


def test_gen_room_rejects_unfillable_rooms():
    with pytest.raises(ValueError):
        gen_room(0, 1, 4, 4, RandomSource(1))
    with pytest.raises(ValueError):
        gen_room(0, 0, 2, 8, RandomSource(1))
    with pytest.raises(ValueError):
        gen_room(20, 1, 10, 10, RandomSource(1))


def test_gen_map_places_one_player_and_fences_grass():
    tile_map = gen_map(40, 40, RandomSource(5))
    assert (tile_map.size_x, tile_map.size_y) == (40, 40)
    assert sum(tile == Tile.PLAYER for tile in tile_map) == 1
    assert _grass_is_fenced(tile_map, range(1, 39), range(1, 39))


def test_gen_map_is_deterministic_for_a_seed():
    first = gen_map(38, 50, RandomSource(9))
    second = gen_map(38, 50, RandomSource(9))
    assert (first.size_x, first.size_y) == (38, 50)
    assert sum(tile == Tile.PLAYER for tile in first) == 1
    assert first.tiles == second.tiles


def test_gen_map_rejects_tiny_sizes():
    with pytest.raises(ValueError):
        gen_map(2, 10, RandomSource(1))


def test_format_map_glyphs():
    tile_map = Map(3, 1)
    tile_map[0][0] = Tile.GRASS
    tile_map[0][1] = Tile.TREE
    assert format_map(tile_map) == "   T ,\n"


def test_format_map_shape():
    lines = format_map(gen_test_map()).splitlines()
    assert len(lines) == 25
    assert all(len(line) == 50 for line in lines)


def test_render_map_prints_formatted_map(capsys):
    tile_map = gen_test_map()
    with mock.patch("subprocess.run") as run:
        render_map(tile_map)
    assert run.call_count == 1
    assert capsys.readouterr().out == format_map(tile_map)