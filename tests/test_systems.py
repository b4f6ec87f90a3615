import pytest

from grovecrawl.components import (
    Interactable,
    Item,
    Peon,
    Player,
    Rigidbody,
    RigidbodyType,
    Tag,
    Texture,
    Transform,
    Velocity,
)
from grovecrawl.entities import EntityManager
from grovecrawl.geometry import CardinalDir, Vec2
from grovecrawl.systems import (
    Camera,
    camera_follow_system,
    collision_system,
    interact_system,
    item_pickup_system,
    orientation_system,
    resolve_collision,
    velocity_system,
)


def _player(em, orientation):
    player = em.create(Vec2(0.0, 0.0), Tag.PLAYER, Vec2(10.0, 10.0))
    player.add_component(Peon(orientation=orientation))
    return player


def _dynamic_actor(em, speed):
    actor = em.registry_create(Vec2(0.0, 0.0), Tag.PLAYER, Vec2(10.0, 10.0))
    em.add_component(actor, Rigidbody(RigidbodyType.DYNAMIC))
    em.add_component(actor, Velocity(Vec2(speed, 0.0), Vec2(speed, 0.0)))
    return actor


def _wall(em, x):
    wall = em.registry_create(Vec2(x, 0.0), Tag.WALL, Vec2(10.0, 10.0))
    em.add_component(wall, Rigidbody(RigidbodyType.STATIC))
    return wall


def test_camera_defaults_to_unit_zoom_at_origin():
    assert Camera() == Camera(0.0, 0.0, 1.0)


def test_resolve_collision_without_motion_does_nothing():
    moving = Transform(pos=Vec2(0.0, 0.0), size=Vec2(10.0, 10.0))
    velocity = Velocity(Vec2(0.0, 0.0), Vec2(0.0, 0.0))
    target = Transform(pos=Vec2(15.0, 0.0), size=Vec2(10.0, 10.0))
    assert resolve_collision(moving, velocity, target, 1.0) is False
    assert velocity.v == Vec2(0.0, 0.0)


def test_resolve_collision_stops_motion_into_target():
    moving = Transform(pos=Vec2(0.0, 0.0), size=Vec2(10.0, 10.0))
    velocity = Velocity(Vec2(100.0, 0.0), Vec2(100.0, 0.0))
    target = Transform(pos=Vec2(50.0, 0.0), size=Vec2(10.0, 10.0))
    assert resolve_collision(moving, velocity, target, 1.0) is True
    assert velocity.v.x == pytest.approx(0.0)
    assert velocity.v.y == pytest.approx(0.0)


def test_collision_system_blocks_dynamic_body():
    em = EntityManager()
    actor = _dynamic_actor(em, 100.0)
    _wall(em, 50.0)
    collision_system(em, 1.0)
    assert em.get_component(actor, Velocity).v.x == pytest.approx(0.0)


def test_collision_system_ignores_distant_wall():
    em = EntityManager()
    actor = _dynamic_actor(em, 100.0)
    _wall(em, 500.0)
    collision_system(em, 1.0)
    assert em.get_component(actor, Velocity).v == Vec2(100.0, 0.0)


def test_collision_system_only_checks_bodies_after_the_actor():
    em = EntityManager()
    _wall(em, 50.0)
    actor = _dynamic_actor(em, 100.0)
    collision_system(em, 1.0)
    assert em.get_component(actor, Velocity).v == Vec2(100.0, 0.0)


def test_velocity_system_moves_by_velocity():
    em = EntityManager()
    entity = em.registry_create(Vec2(0.0, 0.0))
    em.add_component(entity, Velocity(Vec2(3.0, 4.0), Vec2(3.0, 4.0)))
    velocity_system(em, 1.0)
    assert em.get_component(entity, Transform).pos == Vec2(3.0, 4.0)


def test_velocity_system_snaps_small_differences():
    em = EntityManager()
    entity = em.registry_create()
    em.add_component(entity, Velocity(Vec2(105.0, -95.0), Vec2(100.0, -100.0)))
    velocity_system(em, 0.0)
    assert em.get_component(entity, Velocity).v == Vec2(105.0, -95.0)


def test_velocity_system_eases_large_differences():
    em = EntityManager()
    entity = em.registry_create()
    em.add_component(entity, Velocity(Vec2(500.0, 0.0), Vec2(0.0, 0.0)))
    velocity_system(em, 0.0)
    assert em.get_component(entity, Velocity).v == Vec2(0.0, 0.0)
    velocity_system(em, 0.1)
    assert em.get_component(entity, Velocity).v.x == pytest.approx(500.0)


def test_camera_follow_reaches_target_at_full_step():
    em = EntityManager()
    target = em.create(Vec2(40.0, -20.0))
    camera = Camera(0.0, 0.0, 2.0)
    camera_follow_system(camera, target, 0.1)
    assert camera.x == pytest.approx(40.0)
    assert camera.y == pytest.approx(-20.0)
    assert camera.z == 2.0


def test_camera_follow_without_time_stays_put():
    em = EntityManager()
    target = em.create(Vec2(40.0, -20.0))
    camera = Camera(7.0, 8.0, 1.0)
    camera_follow_system(camera, target, 0.0)
    assert (camera.x, camera.y) == (7.0, 8.0)


def test_interact_system_triggers_nearest_interactable():
    em = EntityManager()
    player = _player(em, CardinalDir.E)
    calls = []
    far = em.registry_create(Vec2(100.0, 0.0), size=Vec2(20.0, 20.0))
    near = em.registry_create(Vec2(50.0, 0.0), size=Vec2(20.0, 20.0))
    for entity in (far, near):
        em.add_component(entity, Interactable(lambda manager, this: calls.append((manager, this))))
    interact_system(player, em)
    assert calls == [(em, near)]


def test_interact_system_misses_when_facing_away():
    em = EntityManager()
    player = _player(em, CardinalDir.W)
    calls = []
    target = em.registry_create(Vec2(100.0, 0.0), size=Vec2(20.0, 20.0))
    em.add_component(target, Interactable(lambda manager, this: calls.append(this)))
    interact_system(player, em)
    assert calls == []


def test_interact_system_without_orientation_does_nothing():
    em = EntityManager()
    player = _player(em, CardinalDir.NONE)
    calls = []
    target = em.registry_create(Vec2(-5.0, -5.0), size=Vec2(20.0, 20.0))
    em.add_component(target, Interactable(lambda manager, this: calls.append(this)))
    interact_system(player, em)
    assert calls == []


def test_item_pickup_equips_and_removes_item():
    em = EntityManager()
    player_entity = _player(em, CardinalDir.E)
    player = Player()
    equipped = []
    item = Item(on_equip=lambda manager, who: equipped.append(who))
    item_id = em.registry_create(Vec2(100.0, 0.0), size=Vec2(20.0, 20.0))
    em.add_component(item_id, item)
    item_pickup_system(player_entity, em, player)
    assert player.items == [item]
    assert equipped == [player_entity.id]
    assert not em.has_component(item_id, Item)


def test_item_pickup_without_items_in_reach_changes_nothing():
    em = EntityManager()
    player_entity = _player(em, CardinalDir.N)
    player = Player()
    item_id = em.registry_create(Vec2(100.0, 0.0), size=Vec2(20.0, 20.0))
    em.add_component(item_id, Item())
    item_pickup_system(player_entity, em, player)
    assert player.items == []
    assert em.has_component(item_id, Item)


@pytest.mark.parametrize(
    "orientation, start_width, expected_width",
    [
        (CardinalDir.W, 10.0, -10.0),
        (CardinalDir.SW, 10.0, -10.0),
        (CardinalDir.E, -10.0, 10.0),
        (CardinalDir.NE, -10.0, 10.0),
        (CardinalDir.N, -10.0, -10.0),
    ],
)
def test_orientation_system_mirrors_textured_peons(orientation, start_width, expected_width):
    em = EntityManager()
    entity = em.registry_create(size=Vec2(start_width, 20.0))
    em.add_component(entity, Peon(orientation=orientation))
    em.add_component(entity, Texture(1))
    orientation_system(em)
    assert em.get_component(entity, Transform).size == Vec2(expected_width, 20.0)


def test_orientation_system_skips_untextured_peons():
    em = EntityManager()
    entity = em.registry_create(size=Vec2(10.0, 20.0))
    em.add_component(entity, Peon(orientation=CardinalDir.W))
    orientation_system(em)
    assert em.get_component(entity, Transform).size == Vec2(10.0, 20.0)