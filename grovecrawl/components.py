"""Component types attached to entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Optional

from grovecrawl.geometry import CardinalDir, Vec2

if TYPE_CHECKING:
    from grovecrawl.entities import EntityManager
    from grovecrawl.registry import Registry


class Tag(IntEnum):
    NONE = 0
    PLAYER = 1
    WALL = 2
    ENEMY = 3
    PROJECTILE = 4


@dataclass
class Transform:
    """Position and size; ``parent_id`` of 0 means no parent."""

    parent_id: int = 0
    pos: Vec2 = field(default_factory=Vec2)
    size: Vec2 = field(default_factory=lambda: Vec2(100.0, 100.0))


@dataclass
class Stats:
    hp: int = 0
    move_speed: float = 0.0
    attack_speed: float = 0.0
    damage: float = 0.0

    def __add__(self, other: Stats) -> Stats:
        if not isinstance(other, Stats):
            return NotImplemented
        return Stats(
            self.hp + other.hp,
            self.move_speed + other.move_speed,
            self.attack_speed + other.attack_speed,
            self.damage + other.damage,
        )


@dataclass
class Velocity:
    """Current velocity ``v`` easing toward target velocity ``tv``."""

    tv: Vec2 = field(default_factory=Vec2)
    v: Vec2 = field(default_factory=Vec2)


class RigidbodyType(Enum):
    STATIC = 0
    KINEMATIC = 1
    DYNAMIC = 2


@dataclass
class Rigidbody:
    kind: RigidbodyType = RigidbodyType.STATIC


@dataclass
class Trigger:
    trigger_func: Optional[Callable[[Registry, int], None]] = None


@dataclass
class Interactable:
    interaction: Optional[Callable[[EntityManager, int], None]] = None


@dataclass
class Item:
    on_equip: Optional[Callable[[EntityManager, int], None]] = None
    on_hit: Optional[Callable[[EntityManager, int, int], None]] = None
    on_get_hit: Optional[Callable[[EntityManager, int, int], None]] = None


@dataclass
class Peon:
    stats: Stats = field(default_factory=Stats)
    orientation: CardinalDir = CardinalDir.N


@dataclass
class Player:
    items: list[Item] = field(default_factory=list)
    player_stats: Stats = field(default_factory=Stats)


@dataclass
class Texture:
    texture_id: int = 0