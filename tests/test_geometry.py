import math

import pytest

from grovecrawl.components import Transform, Velocity
from grovecrawl.geometry import (
    CardinalDir,
    Vec2,
    cardinal_to_vec2,
    lerp,
    ray_vs_rect,
    rect_vs_rect,
)


def test_lerp_endpoints_and_midpoint():
    assert lerp(2.0, 6.0, 0.0) == 2.0
    assert lerp(2.0, 6.0, 1.0) == 6.0
    assert lerp(2.0, 6.0, 0.5) == 4.0


def test_vec2_round_trip_and_copy():
    a = Vec2(1.5, -2.0)
    b = Vec2(3.0, 4.0)
    assert (a + b) - b == a
    assert (a * 2.0) / 2.0 == a
    assert -(-a) == a
    c = a.copy()
    c.x = 99.0
    assert a.x == 1.5


def test_ray_hits_rect_from_the_left():
    origin = Vec2(0.0, 0.5)
    direction = Vec2(10.0, 0.0)
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    hit = ray_vs_rect(origin, direction, target)
    assert hit is not None
    assert 0.0 <= hit.time <= 1.0
    assert hit.contact_point.x == pytest.approx(target.pos.x)
    assert hit.contact_point == origin + direction * hit.time
    assert hit.contact_normal == Vec2(-1, 0)


def test_ray_from_right_gets_positive_x_normal():
    origin = Vec2(10.0, 0.5)
    direction = Vec2(-10.0, 0.0)
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    hit = ray_vs_rect(origin, direction, target)
    assert hit is not None
    assert hit.contact_normal == Vec2(1, 0)
    assert hit.contact_point.x == pytest.approx(target.pos.x + target.size.x)


def test_ray_downward_hits_top_face():
    origin = Vec2(0.5, 10.0)
    direction = Vec2(0.0, -10.0)
    target = Transform(pos=Vec2(0.0, 0.0), size=Vec2(1.0, 1.0))
    hit = ray_vs_rect(origin, direction, target)
    assert hit is not None
    assert hit.contact_normal == Vec2(0, 1)
    assert hit.contact_point.y == pytest.approx(target.pos.y + target.size.y)


def test_ray_pointing_away_misses():
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    assert ray_vs_rect(Vec2(0.0, 0.5), Vec2(-10.0, 0.0), target) is None


def test_ray_misses_rect_off_axis():
    target = Transform(pos=Vec2(5.0, 5.0), size=Vec2(1.0, 1.0))
    assert ray_vs_rect(Vec2(0.0, 0.0), Vec2(10.0, 0.0), target) is None


def test_ray_along_edge_gives_nan_and_no_hit():
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    assert ray_vs_rect(Vec2(0.0, 0.0), Vec2(10.0, 0.0), target) is None


def test_rect_vs_rect_zero_velocity_never_hits():
    moving = Transform(pos=Vec2(4.5, 0.0), size=Vec2(1.0, 1.0))
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    assert rect_vs_rect(moving, Velocity(), target, 1.0) is None


def test_rect_vs_rect_hit_within_step():
    moving = Transform(pos=Vec2(0.0, 0.0), size=Vec2(1.0, 1.0))
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    velocity = Velocity(v=Vec2(10.0, 0.0))
    hit = rect_vs_rect(moving, velocity, target, 1.0)
    assert hit is not None
    assert 0.0 <= hit.time <= 1.0
    assert hit.contact_point.x == pytest.approx(target.pos.x - moving.size.x)
    assert hit.contact_normal == Vec2(-1, 0)


def test_rect_vs_rect_too_short_step_misses():
    moving = Transform(pos=Vec2(0.0, 0.0), size=Vec2(1.0, 1.0))
    target = Transform(pos=Vec2(5.0, 0.0), size=Vec2(1.0, 1.0))
    velocity = Velocity(v=Vec2(10.0, 0.0))
    assert rect_vs_rect(moving, velocity, target, 0.1) is None


@pytest.mark.parametrize(
    "direction, expected",
    [
        (CardinalDir.N, Vec2(0, 1)),
        (CardinalDir.S, Vec2(0, -1)),
        (CardinalDir.E, Vec2(1, 0)),
        (CardinalDir.W, Vec2(-1, 0)),
        (CardinalDir.NE, Vec2(1, 1)),
        (CardinalDir.NW, Vec2(-1, 1)),
        (CardinalDir.SE, Vec2(1, -1)),
        (CardinalDir.SW, Vec2(-1, -1)),
        (CardinalDir.NONE, Vec2(0, 0)),
    ],
)
def test_cardinal_to_vec2(direction, expected):
    assert cardinal_to_vec2(direction) == expected


def test_cardinal_vectors_of_opposites_cancel():
    for a, b in [(CardinalDir.N, CardinalDir.S), (CardinalDir.NE, CardinalDir.SW)]:
        total = cardinal_to_vec2(a) + cardinal_to_vec2(b)
        assert math.hypot(total.x, total.y) == 0.0