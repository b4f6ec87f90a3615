"""Vectors, compass directions and ray/rectangle intersection tests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, Protocol, Union

SQRT_2 = 1.414213562373095
RAY_SIZE = 275.0

Number = Union[int, float]


@dataclass
class Vec2:
    """Two-component vector; arithmetic returns new vectors."""

    x: float = 0.0
    y: float = 0.0

    def copy(self) -> Vec2:
        return Vec2(self.x, self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, other: Vec2 | Number) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x * other.x, self.y * other.y)
        if isinstance(other, (int, float)):
            return Vec2(self.x * other, self.y * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: Vec2 | Number) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x / other.x, self.y / other.y)
        if isinstance(other, (int, float)):
            return Vec2(self.x / other, self.y / other)
        return NotImplemented

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)


class CardinalDir(IntEnum):
    N = 0
    W = 1
    E = 2
    S = 3
    NW = 4
    NE = 5
    SW = 6
    SE = 7
    NONE = 8


@dataclass(frozen=True)
class Hit:
    """Result of a successful intersection test."""

    contact_point: Vec2
    contact_normal: Vec2
    time: float


class _Box(Protocol):
    pos: Vec2
    size: Vec2


class _Rect(NamedTuple):
    pos: Vec2
    size: Vec2


class _Moving(Protocol):
    v: Vec2


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def _ieee_div(a: float, b: float) -> float:
    """Float division that yields inf or nan instead of raising on zero."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def ray_vs_rect(ray_origin: Vec2, ray_dir: Vec2, target: _Box) -> Hit | None:
    """Intersect a ray with the rectangle spanning ``target.pos`` to ``pos + size``.

    The hit time is measured in units of ``ray_dir``; hits behind the
    origin still count as long as the far side lies ahead of it.
    """
    near_x = _ieee_div(target.pos.x - ray_origin.x, ray_dir.x)
    near_y = _ieee_div(target.pos.y - ray_origin.y, ray_dir.y)
    far_x = _ieee_div(target.pos.x + target.size.x - ray_origin.x, ray_dir.x)
    far_y = _ieee_div(target.pos.y + target.size.y - ray_origin.y, ray_dir.y)

    if any(math.isnan(value) for value in (near_x, near_y, far_x, far_y)):
        return None

    if near_x > far_x:
        near_x, far_x = far_x, near_x
    if near_y > far_y:
        near_y, far_y = far_y, near_y

    if near_x > far_y or near_y > far_x:
        return None

    t_hit_near = max(near_x, near_y)
    t_hit_far = min(far_x, far_y)
    if t_hit_far < 0:
        return None

    contact_point = ray_origin + ray_dir * t_hit_near

    if near_x > near_y:
        normal = Vec2(1, 0) if ray_dir.x < 0 else Vec2(-1, 0)
    elif near_x < near_y:
        normal = Vec2(0, 1) if ray_dir.y < 0 else Vec2(0, -1)
    else:
        normal = Vec2(0, 0)

    return Hit(contact_point, normal, t_hit_near)


def rect_vs_rect(moving: _Box, velocity: _Moving, target: _Box, dt: float) -> Hit | None:
    """Swept test of ``moving`` travelling ``velocity.v * dt`` against ``target``.

    Returns the hit only if contact happens within this step.
    """
    if velocity.v.x == 0 and velocity.v.y == 0:
        return None
    expanded = _Rect(pos=target.pos - moving.size, size=target.size + moving.size)
    hit = ray_vs_rect(moving.pos, velocity.v * dt, expanded)
    if hit is not None and 0.0 <= hit.time <= 1.0:
        return hit
    return None


_CARDINAL_VECTORS = {
    CardinalDir.N: (0, 1),
    CardinalDir.S: (0, -1),
    CardinalDir.E: (1, 0),
    CardinalDir.W: (-1, 0),
    CardinalDir.NE: (1, 1),
    CardinalDir.NW: (-1, 1),
    CardinalDir.SE: (1, -1),
    CardinalDir.SW: (-1, -1),
}


def cardinal_to_vec2(direction: CardinalDir) -> Vec2:
    """Unnormalised unit-grid vector for a compass direction."""
    x, y = _CARDINAL_VECTORS.get(direction, (0, 0))
    return Vec2(float(x), float(y))