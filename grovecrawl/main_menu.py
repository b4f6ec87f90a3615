"""Title screen with start and exit buttons."""

from __future__ import annotations

from typing import Any

from grovecrawl.components import Transform
from grovecrawl.controls import Key, KeyState
from grovecrawl.geometry import Vec2
from grovecrawl.scene import GameContext, Scene
from grovecrawl.ui import Button


class MainMenuScene(Scene):
    """Highlights the button under the mouse and runs it on a left click."""

    def __init__(self, context: GameContext) -> None:
        super().__init__(context)
        self.start_button = Button(0, Transform(0, Vec2(), Vec2()), 1, 2, None)
        self.exit_button = Button(3, Transform(0, Vec2(), Vec2()), 4, 5, self._exit)

    def _exit(self, data: Any) -> None:
        self.context.window.close()

    def update(self, dt: float) -> None:
        keys = self.context.input_state
        mouse = keys.mouse_pos()
        self.start_button.is_highlighted = self.start_button.is_hovering(mouse.x, mouse.y)
        self.exit_button.is_highlighted = self.exit_button.is_hovering(mouse.x, mouse.y)
        if keys.get_key(Key.LEFT_MB) == KeyState.KEY_PRESS:
            self.start_button.on_click(None)
            self.exit_button.on_click(None)

    def render(self, dt: float) -> None:
        """The menu draws nothing yet."""