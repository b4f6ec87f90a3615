"""Game window: resolution, close state and routing of input events."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional

from grovecrawl.controls import InputState, Key, KeyState
from grovecrawl.geometry import Vec2
from grovecrawl.shader import projection_matrix

# Key symbol and mouse button values as reported by the windowing layer.
_KEY_SYMBOLS = {
    ord("w"): Key.W,
    ord("a"): Key.A,
    ord("s"): Key.S,
    ord("d"): Key.D,
    ord("e"): Key.E,
    ord(" "): Key.SPACE,
}
_MOUSE_BUTTONS = {
    1: Key.LEFT_MB,
    2: Key.MIDDLE_MB,
    4: Key.RIGHT_MB,
}


def map_key(symbol: int) -> Optional[Key]:
    """Game key for a keyboard symbol, or None if the game ignores it."""
    return _KEY_SYMBOLS.get(symbol)


def map_mouse_button(button: int) -> Optional[Key]:
    """Game key for a mouse button, or None if the game ignores it."""
    return _MOUSE_BUTTONS.get(button)


class Window:
    """The game window.

    With a resolution the window is windowed and forwards keyboard and
    mouse input; without one it is fullscreen at the monitor's size. The
    native window is opened on first access of ``native``.
    """

    def __init__(
        self,
        name: str,
        resolution: Optional[Sequence[float]] = None,
        input_state: Optional[InputState] = None,
    ) -> None:
        self.name = name
        self.input_state = input_state if input_state is not None else InputState()
        self._resolution: Optional[tuple[float, float]] = None
        if resolution is not None:
            width, height = resolution
            if width <= 0 or height <= 0:
                raise ValueError(f"resolution must be positive, got {width}x{height}")
            self._resolution = (float(width), float(height))
        self._forward_input = resolution is not None
        self._shaders: list[Any] = []
        self._native: Any = None
        self._running = True
        self._should_close = False
        self.viewport_updated = False

    @property
    def native(self) -> Any:
        """The underlying native window, opened when first needed."""
        if self._native is None:
            self._native = self._open_native()
        return self._native

    def _open_native(self) -> Any:
        import pyglet

        if self._resolution is None:
            native = pyglet.window.Window(caption=self.name, fullscreen=True)
            self._resolution = (float(native.width), float(native.height))
        else:
            width, height = self._resolution
            native = pyglet.window.Window(width=int(width), height=int(height), caption=self.name)
        native.push_handlers(on_resize=self._on_native_resize, on_close=self._on_close)
        if self._forward_input:
            native.push_handlers(
                on_key_press=self._on_key_press,
                on_key_release=self._on_key_release,
                on_mouse_press=self._on_mouse_press,
                on_mouse_release=self._on_mouse_release,
                on_mouse_motion=self._on_mouse_motion,
                on_mouse_drag=self._on_mouse_drag,
            )
        return native

    def _on_native_resize(self, width: int, height: int) -> None:
        # Not marked handled, so the default handler also resets the viewport.
        self.on_resize(width, height)

    def _on_close(self) -> bool:
        self._should_close = True
        return True

    def _on_key_press(self, symbol: int, modifiers: int) -> None:
        key = map_key(symbol)
        if key is not None:
            self.input_state.set_key(key, KeyState.KEY_PRESS)

    def _on_key_release(self, symbol: int, modifiers: int) -> None:
        key = map_key(symbol)
        if key is not None:
            self.input_state.set_key(key, KeyState.KEY_RELEASE)

    def _on_mouse_press(self, x: float, y: float, button: int, modifiers: int) -> None:
        key = map_mouse_button(button)
        if key is not None:
            self.input_state.set_key(key, KeyState.KEY_PRESS)

    def _on_mouse_release(self, x: float, y: float, button: int, modifiers: int) -> None:
        key = map_mouse_button(button)
        if key is not None:
            self.input_state.set_key(key, KeyState.KEY_RELEASE)

    def _on_mouse_motion(self, x: float, y: float, dx: float, dy: float) -> None:
        # The y axis already points up, as the game expects.
        self.input_state.set_mouse_pos(x, y)

    def _on_mouse_drag(
        self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int
    ) -> None:
        self.input_state.set_mouse_pos(x, y)

    def close(self) -> None:
        """Ask the window to close; ``is_running`` turns False at the next swap."""
        self._should_close = True

    def shutdown(self) -> None:
        """Destroy the native window."""
        if self._native is not None:
            self._native.close()
            self._native = None
        self._running = False

    def swap_buffers(self) -> None:
        """Present the frame, process pending events and update the running flag."""
        if self._native is not None:
            self._native.flip()
            self._native.dispatch_events()
        self._running = not self._should_close

    def is_running(self) -> bool:
        return self._running

    def aspect_ratio(self) -> float:
        res = self.resolution()
        return res.x / res.y

    def resolution(self) -> Vec2:
        if self._resolution is None:
            _ = self.native
        width, height = self._resolution
        return Vec2(width, height)

    def viewport_update(self) -> None:
        self.viewport_updated = True

    def add_shader(self, shader: Any) -> None:
        """Register a shader whose projection follows the window size."""
        self._shaders.append(shader)

    def clear_shaders(self) -> None:
        self._shaders.clear()

    @property
    def shaders(self) -> tuple[Any, ...]:
        return tuple(self._shaders)

    def on_resize(self, width: int, height: int) -> None:
        """Adopt a new size and update the projection of every registered shader."""
        self._resolution = (float(width), float(height))
        self.viewport_updated = False
        matrix = projection_matrix(width, height)
        for shader in self._shaders:
            shader.bind()
            shader.set_projection_matrix(matrix)