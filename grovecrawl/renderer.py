"""Batched quad renderer for world sprites and screen-space widgets."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, NamedTuple, Optional, Protocol, Union

from grovecrawl.components import Transform
from grovecrawl.entities import EntityManager
from grovecrawl.geometry import Vec2
from grovecrawl.sparse_set import is_enabled
from grovecrawl.sprites import SpriteSheet, SpriteSheetManager
from grovecrawl.systems import Camera
from grovecrawl.ui import UI, AnchorPoint

MAX_BATCH_SIZE = 10000
TEXTURE_SLOTS = 32
DEFAULT_SPRITE_SHEETS = (
    ("Textures/SpriteSheet.png", 128, 128),
    ("Textures/Hero Walk.png", 9, 19),
)

_FLOAT_SIZE = 4
_UINT_SIZE = 4
_VERTEX_STRIDE = 5 * _FLOAT_SIZE
_ATTRIBUTES = ((2, 0), (2, 2 * _FLOAT_SIZE), (1, 4 * _FLOAT_SIZE))


class Vertex(NamedTuple):
    x: float
    y: float
    u: float
    v: float
    texture_id: float


def quad_indices(batch_size: int) -> list[int]:
    """Element indices drawing ``batch_size`` quads as two triangles each."""
    if batch_size < 0:
        raise ValueError(f"batch size must not be negative, got {batch_size}")
    indices: list[int] = []
    for base in range(0, batch_size * 4, 4):
        indices += [base, base + 1, base + 2, base + 2, base + 3, base]
    return indices


def anchor_offset(anchor: AnchorPoint, resolution: Vec2, size: Vec2) -> Vec2:
    """Centre of an element of ``size`` placed at ``anchor`` inside a region
    of ``resolution`` centred on the origin."""
    anchor = AnchorPoint(anchor)
    horizontal = anchor % 3 - 1
    vertical = 1 - anchor // 3
    return Vec2(
        horizontal * (resolution.x / 2.0 - size.x / 2.0),
        vertical * (resolution.y / 2.0 - size.y / 2.0),
    )


class RenderBackend(Protocol):
    def upload_texture(self, texture_id: int, width: int, height: int, pixels: bytes) -> None: ...
    def clear(self) -> None: ...
    def set_clear_color(self, color: tuple[float, float, float, float]) -> None: ...
    def draw(self, vertices: Sequence[Vertex], bound_textures: Sequence[int]) -> None: ...
    def release(self) -> None: ...


class GLBackend:
    """Draws vertex batches with OpenGL in the current context."""

    def __init__(self, max_batch_size: int = MAX_BATCH_SIZE) -> None:
        from pyglet import gl

        self._gl = gl
        self._textures: dict[int, int] = {}
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

        self._vao = self._generate(gl.glGenVertexArrays)
        gl.glBindVertexArray(self._vao)
        self._vbo = self._generate(gl.glGenBuffers)
        self._ibo = self._generate(gl.glGenBuffers)

        indices = quad_indices(max_batch_size)
        index_data = (gl.GLuint * len(indices))(*indices)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, self._ibo)
        gl.glBufferData(
            gl.GL_ELEMENT_ARRAY_BUFFER, len(indices) * _UINT_SIZE, index_data, gl.GL_STATIC_DRAW
        )
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self._vbo)
        gl.glBufferData(
            gl.GL_ARRAY_BUFFER, max_batch_size * 4 * _VERTEX_STRIDE, None, gl.GL_DYNAMIC_DRAW
        )
        for location, (count, offset) in enumerate(_ATTRIBUTES):
            gl.glEnableVertexAttribArray(location)
            gl.glVertexAttribPointer(
                location, count, gl.GL_FLOAT, gl.GL_FALSE, _VERTEX_STRIDE, offset
            )

    def _generate(self, generator: Callable[[int, Any], None]) -> int:
        names = (self._gl.GLuint * 1)()
        generator(1, names)
        return int(names[0])

    def _delete(self, deleter: Callable[[int, Any], None], name: int) -> None:
        deleter(1, (self._gl.GLuint * 1)(name))

    def upload_texture(self, texture_id: int, width: int, height: int, pixels: bytes) -> None:
        gl = self._gl
        name = self._generate(gl.glGenTextures)
        gl.glBindTexture(gl.GL_TEXTURE_2D, name)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, gl.GL_CLAMP_TO_BORDER)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, gl.GL_CLAMP_TO_BORDER)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_NEAREST)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
        buffer = (gl.GLubyte * len(pixels))(*pixels)
        gl.glTexImage2D(
            gl.GL_TEXTURE_2D, 0, gl.GL_RGBA, width, height, 0,
            gl.GL_RGBA, gl.GL_UNSIGNED_BYTE, buffer,
        )
        gl.glGenerateMipmap(gl.GL_TEXTURE_2D)
        self._textures[texture_id] = name

    def clear(self) -> None:
        self._gl.glClear(self._gl.GL_COLOR_BUFFER_BIT)

    def set_clear_color(self, color: tuple[float, float, float, float]) -> None:
        self._gl.glClearColor(*color)

    def draw(self, vertices: Sequence[Vertex], bound_textures: Sequence[int]) -> None:
        if not vertices:
            return
        gl = self._gl
        gl.glBindVertexArray(self._vao)
        for slot, texture_id in enumerate(bound_textures):
            gl.glActiveTexture(gl.GL_TEXTURE0 + slot)
            gl.glBindTexture(gl.GL_TEXTURE_2D, self._textures.get(texture_id, 0))
        flat = [component for vertex in vertices for component in vertex]
        data = (gl.GLfloat * len(flat))(*flat)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self._vbo)
        gl.glBufferSubData(gl.GL_ARRAY_BUFFER, 0, len(flat) * _FLOAT_SIZE, data)
        gl.glDrawElements(gl.GL_TRIANGLES, len(vertices) // 4 * 6, gl.GL_UNSIGNED_INT, None)

    def release(self) -> None:
        gl = self._gl
        for name in self._textures.values():
            self._delete(gl.glDeleteTextures, name)
        self._textures.clear()
        self._delete(gl.glDeleteVertexArrays, self._vao)
        self._delete(gl.glDeleteBuffers, self._vbo)
        self._delete(gl.glDeleteBuffers, self._ibo)


ResolutionSource = Union[Vec2, Sequence[float], Callable[[], Any]]


class Renderer:
    """Collects quads into batches and hands them to a backend."""

    def __init__(
        self,
        resolution: ResolutionSource,
        sprite_sheets: Optional[Iterable[SpriteSheet]] = None,
        backend: Optional[RenderBackend] = None,
    ) -> None:
        self._resolution = resolution
        self.max_batch_size = MAX_BATCH_SIZE
        self.vertices: list[Vertex] = []
        self.camera = Camera()
        self._bound_textures = [0] * TEXTURE_SLOTS
        self._last_texture_slot = 0
        self._backend = backend if backend is not None else GLBackend(self.max_batch_size)

        if sprite_sheets is None:
            sheets = [SpriteSheet(path, x, y) for path, x, y in DEFAULT_SPRITE_SHEETS]
        else:
            sheets = list(sprite_sheets)
        for sheet in sheets:
            sprite = sheet.sprite
            self._backend.upload_texture(sprite.texture_id, sprite.width, sprite.height, sprite.pixels)
        self.sprite_sheets = SpriteSheetManager(sheets, self.bind_texture)

    @property
    def bound_textures(self) -> tuple[int, ...]:
        return tuple(self._bound_textures[:self._last_texture_slot])

    def _current_resolution(self) -> Vec2:
        res = self._resolution() if callable(self._resolution) else self._resolution
        x, y = res
        return Vec2(x, y)

    def clear(self) -> None:
        self._backend.clear()

    def begin_scene(self, camera: Camera, shader: Any) -> None:
        """Bind ``shader``, give it the camera and use the camera for culling."""
        shader.bind()
        shader.set_camera_uniform(camera.x, camera.y, camera.z)
        self.camera = Camera(camera.x, camera.y, camera.z)

    def end_scene(self) -> None:
        if self.vertices:
            self.flush()

    def _push_quad(self, center: Vec2, size: Vec2, sprite_id: int) -> None:
        region = self.sprite_sheets.get_sprite(sprite_id)
        tex = float(region.sheet_index)
        u0 = region.corner.x
        v0 = region.corner.y - region.size.y
        u1 = u0 + region.size.x
        v1 = v0 + region.size.y
        half_x, half_y = size.x / 2.0, size.y / 2.0
        self.vertices += [
            Vertex(center.x - half_x, center.y - half_y, u0, v0, tex),
            Vertex(center.x + half_x, center.y - half_y, u1, v0, tex),
            Vertex(center.x + half_x, center.y + half_y, u1, v1, tex),
            Vertex(center.x - half_x, center.y + half_y, u0, v1, tex),
        ]
        if len(self.vertices) // 4 >= self.max_batch_size:
            self.flush()

    def draw_sprite(self, transform: Transform, sprite_index: int) -> None:
        """Queue a sprite centred on ``transform.pos`` unless it is off screen."""
        pos, size = transform.pos, transform.size
        if size.x == 0 and size.y == 0:
            return
        res = self._current_resolution()
        cam = self.camera
        half_x, half_y = size.x / 2.0, size.y / 2.0
        if (
            (pos.x + half_x - cam.x) / cam.z < -res.x / 2.0
            or (pos.x - half_x - cam.x) / cam.z >= res.x / 2.0
            or (pos.y + half_y - cam.y) / cam.z < -res.y / 2.0
            or (pos.y - half_y - cam.y) / cam.z >= res.y / 2.0
        ):
            return
        self._push_quad(pos, size, sprite_index)

    def draw_entity_sprite(self, em: EntityManager, transform: Transform, sprite_index: int) -> None:
        """Draw a sprite whose position is relative to its chain of parents."""
        pos = transform.pos.copy()
        parent_id = transform.parent_id
        while is_enabled(parent_id):
            parent = em.get_component(parent_id, Transform)
            pos = pos + parent.pos
            parent_id = parent.parent_id
        self.draw_sprite(Transform(transform.parent_id, pos, transform.size.copy()), sprite_index)

    def flush(self) -> None:
        """Draw the queued quads and release the texture slots."""
        self._backend.draw(list(self.vertices), self.bound_textures)
        self.vertices.clear()
        self._last_texture_slot = 0

    def draw_ui(self, ui: UI) -> None:
        """Queue a widget in screen space, placed by its anchor and parents."""
        transform = ui.transform
        res = self._current_resolution()
        parent_pos = Vec2()
        if ui.parent is not None:
            root_anchor = AnchorPoint.CC
            node: Optional[UI] = ui.parent
            while node is not None:
                parent_pos = parent_pos + node.transform.pos
                root_anchor = node.anchor
                node = node.parent
            parent_size = ui.parent.transform.size
            anchor_pos = anchor_offset(root_anchor, res, parent_size) + anchor_offset(
                ui.anchor, parent_size, transform.size
            )
        else:
            anchor_pos = anchor_offset(ui.anchor, res, transform.size)
        center = parent_pos + anchor_pos + transform.pos
        self._push_quad(center, transform.size, ui.current_sprite_id())

    def set_clear_color(self, color: Sequence[float]) -> None:
        values = tuple(float(component) for component in color)
        if len(values) != 4:
            raise ValueError(f"clear colour needs four components, got {len(values)}")
        self._backend.set_clear_color(values)

    def next_texture_unit(self) -> int:
        if self._last_texture_slot >= TEXTURE_SLOTS:
            raise RuntimeError(f"all {TEXTURE_SLOTS} texture units are in use")
        slot = self._last_texture_slot
        self._last_texture_slot += 1
        return slot

    def is_texture_bound(self, texture_id: int) -> bool:
        return texture_id in self._bound_textures[:self._last_texture_slot]

    def bind_texture(self, texture_id: int) -> None:
        """Give ``texture_id`` a texture unit for the current batch."""
        if not self.is_texture_bound(texture_id):
            self._bound_textures[self.next_texture_unit()] = texture_id

    def shutdown(self) -> None:
        self._backend.release()