"""The playable scene: a tile map, the player and things to interact with."""

from __future__ import annotations

from typing import Any, Optional

from grovecrawl.animation import AnimationType
from grovecrawl.components import (
    Interactable,
    Item,
    Peon,
    Player,
    Rigidbody,
    RigidbodyType,
    Stats,
    Tag,
    Texture,
    Transform,
    Velocity,
)
from grovecrawl.controls import GamepadAxis, GamepadButton, Key, KeyState
from grovecrawl.entities import Entity, EntityManager
from grovecrawl.geometry import SQRT_2, CardinalDir, Vec2, cardinal_to_vec2
from grovecrawl.mapgen import Map, Tile, gen_map, gen_test_map
from grovecrawl.scene import GameContext, Scene
from grovecrawl.systems import (
    Camera,
    camera_follow_system,
    collision_system,
    interact_system,
    item_pickup_system,
    orientation_system,
    velocity_system,
)

PLAYER_SPEED = 500.0
MAX_ZOOM = 5.0
MIN_ZOOM = 1.0
PLAYER_TEXTURE = 257
PLAYER_SIZE = Vec2(9 * 5.0, 19 * 5.0)
TILE_SIZE = Vec2(100.0, 100.0)
THROWN_ITEM_SPEED = 500.0
VERTEX_SHADER = "Shaders/vertex.shader"
FRAGMENT_SHADER = "Shaders/fragment.shader"


def _clamp_zoom(value: float) -> float:
    return min(max(value, MIN_ZOOM), MAX_ZOOM)


def _equip_message(em: EntityManager, player_id: int) -> None:
    print(f"Item equipped by {player_id} entity")


def _spawn_item(em: EntityManager, this_id: int) -> None:
    """Interaction of the test interactable: throw an item and vanish."""
    player_id = next(
        (entity for entity in em.iterate(Peon) if em.get_component(entity, Tag) == Tag.PLAYER),
        None,
    )
    if player_id is None:
        raise LookupError("no player entity to interact with")
    peon = em.get_component(player_id, Peon)
    origin = em.get_component(this_id, Transform).pos.copy()
    item = em.registry_create(origin, Tag.NONE, TILE_SIZE.copy())
    em.add_component(item, Item(on_equip=_equip_message))
    em.add_component(item, Texture(int(Tile.TREE)))
    em.add_component(
        item, Velocity(Vec2(0.0, 0.0), cardinal_to_vec2(peon.orientation) * -THROWN_ITEM_SPEED)
    )
    print("Sayonara... Tomos-san...")
    em.destroy(this_id)


class GameScene(Scene):
    """Player walking around a map of grass and trees."""

    def __init__(self, context: GameContext) -> None:
        super().__init__(context)
        self.map = Map()
        self.map_id = 0
        self.em = EntityManager()
        self.shader: Any = None
        self.tile = Transform()
        self.camera = Camera()
        self.player = Player()
        self.player_entity: Optional[Entity] = None
        self._animation_started = False
        self._animation_start = 0.0

    def start(self) -> None:
        context = self.context
        self.player.player_stats = Stats(100, 500.0, 2.0, 100.0)
        self.tile.size = TILE_SIZE.copy()
        self.camera = Camera(0.0, 0.0, 1.0)
        self.shader = context.shader_factory(VERTEX_SHADER, FRAGMENT_SHADER, context.window)
        self.shader.bind()

        self.player_entity = self.em.create(Vec2(0.0, 0.0), Tag.PLAYER, PLAYER_SIZE.copy())
        self.player_entity.add_component(Rigidbody(RigidbodyType.DYNAMIC))
        self.player_entity.add_component(Velocity())
        self.player_entity.add_component(Texture(PLAYER_TEXTURE))
        self.player_entity.add_component(Peon())
        self.map_id = self.em.registry_create(Vec2(0.0, 0.0), Tag.NONE, Vec2(100.0, 100.0))

        inter_pos = self.player_entity.transform().pos + Vec2(self.tile.size.x, 0.0)
        self.rebuild_map(gen_test_map())

        inter = self.em.registry_create(inter_pos, Tag.NONE, Vec2(100.0, 100.0))
        self.em.add_component(inter, Interactable(_spawn_item))
        self.em.add_component(inter, Texture(int(Tile.PLAYER)))

        self.shader.set_camera_uniform(self.camera.x, self.camera.y, self.camera.z)

    def rebuild_map(self, tile_map: Map) -> None:
        """Replace the wall entities with ones for ``tile_map`` and move the
        player to its spawn tile, if it has one."""
        em = self.em
        self.map = tile_map
        for entity in list(em.iterate(Tag)):
            if em.get_component(entity, Tag) == Tag.WALL:
                em.destroy(entity)

        resolution = self.context.window.resolution()
        tile_size = self.tile.size
        for i in range(tile_map.size_y):
            row = tile_map[i]
            for j in range(tile_map.size_x):
                cell = Vec2(j * tile_size.x, i * tile_size.y) - resolution
                if row[j] == Tile.PLAYER:
                    self.player_entity.transform().pos = cell.copy()
                    row[j] = Tile.GRASS
                tile = row[j]
                if tile == Tile.NONE:
                    continue
                wall = em.registry_create(cell, Tag.WALL, tile_size.copy())
                em.add_component(wall, Texture(int(tile)))
                em.get_component(wall, Transform).parent_id = self.map_id
                if tile == Tile.TREE:
                    em.add_component(wall, Rigidbody(RigidbodyType.STATIC))

        player_pos = self.player_entity.transform().pos
        self.camera.x = player_pos.x
        self.camera.y = player_pos.y

    def _update_zoom(self, dt: float) -> None:
        keys = self.context.input_state
        camera = self.camera
        if keys.get_key(Key.RIGHT_MB) == KeyState.KEY_HOLD:
            camera.z = _clamp_zoom(camera.z + camera.z * PLAYER_SPEED / 500.0 * dt)
        else:
            camera.z = _clamp_zoom(
                camera.z + camera.z * PLAYER_SPEED / 500.0 * dt * keys.get_gamepad_axis(GamepadAxis.RT)
            )
        if keys.get_key(Key.LEFT_MB) == KeyState.KEY_HOLD:
            camera.z = _clamp_zoom(camera.z - camera.z * PLAYER_SPEED / 500.0 * dt)
        else:
            camera.z = _clamp_zoom(
                camera.z - camera.z * PLAYER_SPEED / 500.0 * dt * keys.get_gamepad_axis(GamepadAxis.LT)
            )

    def _steer(self, velocity: Velocity, peon: Peon) -> None:
        keys = self.context.input_state
        tv_x = PLAYER_SPEED * keys.get_gamepad_axis(GamepadAxis.LEFT_X)
        tv_y = -PLAYER_SPEED * keys.get_gamepad_axis(GamepadAxis.LEFT_Y)

        vertical = False
        if keys.get_key(Key.W) == KeyState.KEY_HOLD:
            tv_y = PLAYER_SPEED
            peon.orientation = CardinalDir.N
            vertical = True
        elif keys.get_key(Key.S) == KeyState.KEY_HOLD:
            tv_y = -PLAYER_SPEED
            peon.orientation = CardinalDir.S
            vertical = True

        if keys.get_key(Key.D) == KeyState.KEY_HOLD:
            tv_x = PLAYER_SPEED
            if vertical:
                peon.orientation = CardinalDir.NE if peon.orientation == CardinalDir.N else CardinalDir.SE
            else:
                peon.orientation = CardinalDir.E
        elif keys.get_key(Key.A) == KeyState.KEY_HOLD:
            tv_x = -PLAYER_SPEED
            if vertical:
                peon.orientation = CardinalDir.NW if peon.orientation == CardinalDir.N else CardinalDir.SW
            else:
                peon.orientation = CardinalDir.W

        target = Vec2(tv_x, tv_y)
        if target.x != 0 and target.y != 0:
            target = target * (SQRT_2 / 2.0)
        velocity.tv = target

    def update(self, dt: float) -> None:
        context = self.context
        keys = context.input_state
        player_entity = self.player_entity
        velocity = player_entity.get_component(Velocity)
        peon = player_entity.get_component(Peon)

        self._update_zoom(dt)
        self._steer(velocity, peon)

        if keys.get_key(Key.E) == KeyState.KEY_PRESS:
            item_pickup_system(player_entity, self.em, self.player)
            interact_system(player_entity, self.em)

        if (
            keys.get_key(Key.SPACE) == KeyState.KEY_PRESS
            or keys.get_gamepad_button(GamepadButton.A) == KeyState.KEY_PRESS
        ):
            self.rebuild_map(gen_map(self.map.size_x, self.map.size_y, context.rng))

        if (
            keys.get_gamepad_button(GamepadButton.START) == KeyState.KEY_PRESS
            or keys.get_key(Key.MIDDLE_MB) == KeyState.KEY_PRESS
        ):
            context.window.close()
            return

        texture = player_entity.get_component(Texture)
        if (
            keys.get_gamepad_button(GamepadButton.SELECT) == KeyState.KEY_PRESS
            or keys.get_key(Key.E) == KeyState.KEY_PRESS
        ):
            texture.texture_id, self._animation_start = context.animations.start_animation(
                AnimationType.PLAYER_IDLE
            )
            self._animation_started = True
        elif self._animation_started:
            texture.texture_id = context.animations.continue_animation(
                AnimationType.PLAYER_IDLE, self._animation_start
            )

        collision_system(self.em, dt)
        velocity_system(self.em, dt)
        camera_follow_system(self.camera, player_entity, dt)
        orientation_system(self.em)

    def render(self, dt: float) -> None:
        renderer = self.context.renderer
        renderer.begin_scene(self.camera, self.shader)
        player_id = self.player_entity.id
        for entity in self.em.iterate(Texture):
            if entity == player_id:
                continue
            renderer.draw_sprite(
                self.em.get_component(entity, Transform),
                self.em.get_component(entity, Texture).texture_id,
            )
        renderer.draw_sprite(
            self.player_entity.transform(), self.player_entity.get_component(Texture).texture_id
        )
        renderer.end_scene()