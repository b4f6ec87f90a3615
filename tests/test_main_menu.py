from grovecrawl.controls import Key, KeyState
from grovecrawl.main_menu import MainMenuScene
from grovecrawl.scene import GameContext


class FakeWindow:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def _menu():
    return MainMenuScene(GameContext(window=FakeWindow()))


def test_hover_highlights_buttons():
    menu = _menu()
    menu.context.input_state.set_mouse_pos(0, 0)
    menu.update(0.0)
    assert menu.start_button.is_highlighted is True
    assert menu.start_button.current_sprite_id() == menu.start_button.highlight_sprite_id


def test_away_from_buttons_nothing_highlighted():
    menu = _menu()
    menu.context.input_state.set_mouse_pos(5, 5)
    menu.update(0.0)
    assert menu.start_button.is_highlighted is False
    assert menu.exit_button.current_sprite_id() == menu.exit_button.sprite_id


def test_click_on_exit_closes_window():
    menu = _menu()
    menu.context.input_state.set_mouse_pos(0, 0)
    menu.context.input_state.set_key(Key.LEFT_MB, KeyState.KEY_PRESS)
    menu.update(0.0)
    assert menu.context.window.closed is True


def test_click_elsewhere_keeps_window_open():
    menu = _menu()
    menu.context.input_state.set_mouse_pos(5, 5)
    menu.context.input_state.set_key(Key.LEFT_MB, KeyState.KEY_PRESS)
    menu.update(0.0)
    assert menu.context.window.closed is False