"""Per-frame systems that move, collide and orient entities."""

from __future__ import annotations

from dataclasses import dataclass

from grovecrawl.components import (
    Interactable,
    Item,
    Peon,
    Player,
    Rigidbody,
    RigidbodyType,
    Texture,
    Transform,
    Velocity,
)
from grovecrawl.entities import Entity, EntityManager
from grovecrawl.geometry import (
    RAY_SIZE,
    SQRT_2,
    CardinalDir,
    Vec2,
    cardinal_to_vec2,
    lerp,
    ray_vs_rect,
    rect_vs_rect,
)
from grovecrawl.sparse_set import is_enabled

VELOCITY_SNAP = 10.0
VELOCITY_EASE = 10.0
CAMERA_SMOOTH_SPEED = 10.0

_DIAGONAL = RAY_SIZE * SQRT_2 / 2.0
_INTERACT_RAYS = {
    CardinalDir.N: Vec2(0.0, RAY_SIZE),
    CardinalDir.S: Vec2(0.0, -RAY_SIZE),
    CardinalDir.E: Vec2(RAY_SIZE, 0.0),
    CardinalDir.W: Vec2(-RAY_SIZE, 0.0),
    CardinalDir.NE: Vec2(_DIAGONAL, _DIAGONAL),
    CardinalDir.NW: Vec2(-_DIAGONAL, _DIAGONAL),
    CardinalDir.SE: Vec2(_DIAGONAL, -_DIAGONAL),
    CardinalDir.SW: Vec2(-_DIAGONAL, -_DIAGONAL),
}

_FACING_LEFT = {CardinalDir.W, CardinalDir.NW, CardinalDir.SW}
_FACING_RIGHT = {CardinalDir.E, CardinalDir.NE, CardinalDir.SE}


@dataclass
class Camera:
    """Camera position and zoom factor ``z``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 1.0


def resolve_collision(transform: Transform, velocity: Velocity, target: Transform, dt: float) -> bool:
    """Cancel the part of ``velocity`` that would carry ``transform`` into ``target``."""
    hit = rect_vs_rect(transform, velocity, target, dt)
    if hit is None:
        return False
    magnitude = Vec2(abs(velocity.v.x), abs(velocity.v.y))
    velocity.v = velocity.v + hit.contact_normal * magnitude
    return True


def collision_system(em: EntityManager, dt: float) -> None:
    """Resolve collisions of every dynamic body against the bodies after it."""
    bodies = list(em.iterate(Rigidbody))
    for position, actor in enumerate(bodies):
        if em.get_component(actor, Rigidbody).kind != RigidbodyType.DYNAMIC:
            continue
        actor_transform = em.get_component(actor, Transform)
        actor_velocity = em.get_component(actor, Velocity)

        hits = []
        for acted in bodies[position + 1:]:
            hit = rect_vs_rect(actor_transform, actor_velocity, em.get_component(acted, Transform), dt)
            if hit is not None:
                hits.append((hit.time, acted))
        hits.sort(key=lambda pair: pair[0])

        for _, acted in hits:
            resolve_collision(actor_transform, actor_velocity, em.get_component(acted, Transform), dt)


def _ease(current: float, target: float, dt: float) -> float:
    if abs(target - current) <= VELOCITY_SNAP:
        return target
    return lerp(current, target, dt * VELOCITY_EASE)


def velocity_system(em: EntityManager, dt: float) -> None:
    """Move entities by their velocity and ease it toward the target velocity."""
    for entity in em.iterate(Velocity):
        velocity = em.get_component(entity, Velocity)
        transform = em.get_component(entity, Transform)
        transform.pos = transform.pos + velocity.v * dt
        velocity.v = Vec2(
            _ease(velocity.v.x, velocity.tv.x, dt),
            _ease(velocity.v.y, velocity.tv.y, dt),
        )


def camera_follow_system(camera: Camera, to_follow: Entity, dt: float) -> None:
    """Glide the camera toward the followed entity."""
    target = to_follow.transform().pos
    t = dt * CAMERA_SMOOTH_SPEED
    camera.x = lerp(camera.x, target.x, t)
    camera.y = lerp(camera.y, target.y, t)


def _closest_hit(em: EntityManager, component_type: type, origin: Vec2, direction: Vec2) -> int | None:
    best_time = float("inf")
    best: int | None = None
    for entity in em.iterate(component_type):
        hit = ray_vs_rect(origin, direction, em.get_component(entity, Transform))
        if hit is not None and 0.0 <= hit.time <= 1.0 and hit.time < best_time:
            best_time = hit.time
            best = entity
    return best


def interact_system(player: Entity, em: EntityManager) -> None:
    """Trigger the nearest interactable in front of the player."""
    transform = player.transform()
    peon = player.get_component(Peon)
    direction = _INTERACT_RAYS.get(peon.orientation)
    if direction is None:
        return
    origin = transform.pos + transform.size / 2.0
    target = _closest_hit(em, Interactable, origin, direction)
    if target is None or not is_enabled(target):
        return
    interaction = em.get_component(target, Interactable).interaction
    if interaction is not None:
        interaction(em, target)


def item_pickup_system(player_entity: Entity, em: EntityManager, player: Player) -> None:
    """Pick up the nearest item in front of the player and equip it."""
    transform = player_entity.transform()
    peon = player_entity.get_component(Peon)
    origin = transform.pos + transform.size / 2.0
    direction = cardinal_to_vec2(peon.orientation) * RAY_SIZE
    target = _closest_hit(em, Item, origin, direction)
    if target is None:
        return
    item = em.get_component(target, Item)
    player.items.append(item)
    em.destroy(target)
    if item.on_equip is not None:
        item.on_equip(em, player_entity.id)


def orientation_system(em: EntityManager) -> None:
    """Mirror textured peons horizontally to face the way they look."""
    for entity in em.iterate(Peon):
        if not em.has_component(entity, Texture):
            continue
        orientation = em.get_component(entity, Peon).orientation
        transform = em.get_component(entity, Transform)
        if orientation in _FACING_LEFT:
            transform.size = Vec2(-abs(transform.size.x), transform.size.y)
        elif orientation in _FACING_RIGHT:
            transform.size = Vec2(abs(transform.size.x), transform.size.y)