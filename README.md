# grovecrawl

A small top-down roguelike. You walk a hero through a field of grass fenced by
trees. New maps are generated procedurally: the area is split into rooms by
binary space partitioning, and each room is carved out by random walkers.
Underneath sits a sparse-set entity registry that holds every component.

## Installing

```
pip install grovecrawl
```

To run the test suite as well:

```
pip install "grovecrawl[test]"
pytest
```

## Playing

```
grovecrawl
```

This opens a 1920x1080 window (using pyglet and OpenGL) and starts the game
scene on a 25x25 test map. The shaders are read from `Shaders/vertex.shader`
and `Shaders/fragment.shader`, and the sprite sheets from
`Textures/SpriteSheet.png` and `Textures/Hero Walk.png`, all relative to the
directory you start the game in. These files are not shipped with the package;
without them the game stops with an error.

Controls:

| Input                   | Action                                               |
|-------------------------|------------------------------------------------------|
| W / A / S / D           | move (diagonals are allowed)                         |
| E                       | pick up the item ahead, then interact with what is ahead |
| Space                   | generate a new map of the same size                  |
| Hold right / left mouse | change the camera zoom (clamped between 1 and 5)     |
| Middle mouse            | quit                                                 |

The scene also reacts to gamepad input (left stick, A, Start, Select, the
triggers) through `grovecrawl.controls.InputState`, but the `grovecrawl`
command does not read any gamepad: `GameContext.gamepad_reader` reports none
unless you supply your own reader.

## Using the pieces

The modules can be used without opening a window.

Generating a map:

```python
from grovecrawl.rng import RandomSource
from grovecrawl.mapgen import gen_map, format_map

rng = RandomSource(1234)
tile_map = gen_map(80, 80, rng)
print(format_map(tile_map))
```

`gen_map` marks one grass tile as `Tile.PLAYER`, the spawn point.
`RandomSource` is a 32-bit Mersenne Twister, so a given seed always gives the
same map. `render_map` clears the terminal and prints the same picture.

Working with entities:

```python
from grovecrawl.entities import EntityManager
from grovecrawl.components import Tag, Velocity
from grovecrawl.geometry import Vec2

em = EntityManager()
player = em.registry_create(Vec2(0, 0), Tag.PLAYER, Vec2(45, 95))
em.add_component(player, Velocity())
for entity in em.iterate(Velocity):
    print(em.get_component(entity, Tag))
```

Every entity made by `EntityManager` carries a `Tag` and a `Transform`.
`EntityManager.create` returns an `Entity` handle instead of a bare id; used
as a context manager, the handle destroys its entity on exit.

The registry in `grovecrawl.registry` can be used on its own. `Registry`
offers `create`, `emplace`, `get_component`, `has_component`,
`has_components`, `erase`, `iterate`, `destroy`, `shrink_to_fit`, and saving
to and loading from a file with `serialize` and `deserialize` (components are
stored with pickle; `deserialize` fills only the component types the registry
already knows, for example through `declare`).

Other modules:

- `grovecrawl.geometry`: `Vec2`, `CardinalDir`, `lerp`, `ray_vs_rect` and the
  swept `rect_vs_rect`, both returning a `Hit` or None.
- `grovecrawl.systems`: the per-frame `collision_system`, `velocity_system`,
  `camera_follow_system`, `interact_system`, `item_pickup_system` and
  `orientation_system`.
- `grovecrawl.controls`: `InputState`, which turns raw key and button states
  into press, hold, release and none from frame to frame.
- `grovecrawl.gametime`: `Clock`, the frame timer.
- `grovecrawl.animation`: `AnimationManager`, which picks the frame of a
  looping animation from the clock.
- `grovecrawl.sprites`: `SpriteSheet` and `SpriteSheetManager`, which number
  the sprites of several sheets consecutively (images are read with Pillow).
- `grovecrawl.ui`: `UI` widgets and `Button`.

## What it does not do

- The title screen, `grovecrawl.main_menu.MainMenuScene`, handles hovering and
  clicking its buttons but draws nothing, and the `grovecrawl` command does not
  show it.
- The game does not save or load progress; only the registry itself can be
  written to a file.
- There is no combat: `Item.on_hit`, `Item.on_get_hit` and the `Stats` of a
  `Peon` are stored but never used by any system.