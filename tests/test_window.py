import pytest

from grovecrawl.controls import InputState, Key, KeyState
from grovecrawl.geometry import Vec2
from grovecrawl.shader import projection_matrix
from grovecrawl.window import Window, map_key, map_mouse_button


class RecordingShader:
    def __init__(self):
        self.calls = []

    def bind(self):
        self.calls.append("bind")

    def set_projection_matrix(self, matrix=None):
        self.calls.append(("projection", matrix))


def test_map_key_known_symbols():
    assert map_key(ord("w")) == Key.W
    assert map_key(ord("a")) == Key.A
    assert map_key(ord("s")) == Key.S
    assert map_key(ord("d")) == Key.D
    assert map_key(ord("e")) == Key.E
    assert map_key(ord(" ")) == Key.SPACE


def test_map_key_unknown_symbol():
    assert map_key(0) is None


def test_map_mouse_button():
    assert map_mouse_button(1) == Key.LEFT_MB
    assert map_mouse_button(2) == Key.MIDDLE_MB
    assert map_mouse_button(4) == Key.RIGHT_MB
    assert map_mouse_button(8) is None


def test_resolution_and_aspect_ratio():
    window = Window("test", (1920, 1080))
    assert window.resolution() == Vec2(1920.0, 1080.0)
    assert window.aspect_ratio() == pytest.approx(1920 / 1080)


def test_invalid_resolution_raises():
    with pytest.raises(ValueError):
        Window("test", (0, 100))


def test_close_takes_effect_at_swap():
    window = Window("test", (640, 480))
    window.close()
    assert window.is_running() is True
    window.swap_buffers()
    assert window.is_running() is False


def test_swap_without_close_keeps_running():
    window = Window("test", (640, 480))
    window.swap_buffers()
    assert window.is_running() is True


def test_shutdown_stops_running():
    window = Window("test", (640, 480))
    window.shutdown()
    assert window.is_running() is False


def test_on_resize_updates_resolution_and_shaders():
    window = Window("test", (640, 480))
    shader = RecordingShader()
    window.add_shader(shader)
    window.viewport_update()
    window.on_resize(800, 600)
    assert window.resolution() == Vec2(800.0, 600.0)
    assert window.viewport_updated is False
    assert shader.calls == ["bind", ("projection", projection_matrix(800, 600))]


def test_clear_shaders():
    window = Window("test", (640, 480))
    shader = RecordingShader()
    window.add_shader(shader)
    window.clear_shaders()
    window.on_resize(320, 240)
    assert window.shaders == ()
    assert shader.calls == []


def test_key_events_reach_input_state():
    state = InputState()
    window = Window("test", (640, 480), state)
    window._on_key_press(ord("w"), 0)
    assert state.get_key(Key.W) == KeyState.KEY_PRESS
    window._on_key_release(ord("w"), 0)
    assert state.get_key(Key.W) == KeyState.KEY_RELEASE


def test_mouse_events_reach_input_state():
    state = InputState()
    window = Window("test", (640, 480), state)
    window._on_mouse_press(10, 20, 4, 0)
    assert state.get_key(Key.RIGHT_MB) == KeyState.KEY_PRESS
    window._on_mouse_motion(12.0, 34.0, 0, 0)
    assert state.mouse_pos() == Vec2(12.0, 34.0)


def test_native_close_request_sets_close_flag():
    window = Window("test", (640, 480))
    assert window._on_close() is True
    window.swap_buffers()
    assert window.is_running() is False