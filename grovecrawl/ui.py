"""Screen-space widgets anchored to the window or to a parent widget."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum
from typing import Any, Optional

from grovecrawl.components import Transform


class AnchorPoint(IntEnum):
    """Horizontal (left, centre, right) by vertical (up, centre, down) anchor."""

    LU = 0
    CU = 1
    RU = 2
    LC = 3
    CC = 4
    RC = 5
    LD = 6
    CD = 7
    RD = 8


class UI:
    """A sprite placed on screen relative to an anchor."""

    def __init__(
        self,
        sprite_id: int,
        transform: Transform,
        parent: Optional[UI] = None,
        anchor: AnchorPoint = AnchorPoint.CC,
    ) -> None:
        self.sprite_id = sprite_id
        self.transform = transform
        self.parent = parent
        self.anchor = AnchorPoint(anchor)

    def current_sprite_id(self) -> int:
        """Sprite to draw for the widget's present state."""
        return self.sprite_id

    def on_click(self, data: Any) -> None:
        """React to a click; plain widgets ignore it."""

    def is_hovering(self, mouse_x: float, mouse_y: float) -> bool:
        pos, size = self.transform.pos, self.transform.size
        return abs(pos.x - mouse_x) <= size.x and abs(pos.y - mouse_y) <= size.y


class Button(UI):
    """Widget with highlighted and pressed sprites that runs a callback on click."""

    def __init__(
        self,
        sprite_id: int,
        transform: Transform,
        highlight_sprite_id: int,
        pressed_sprite_id: int,
        button_func: Optional[Callable[[Any], Any]] = None,
        parent: Optional[UI] = None,
        anchor: AnchorPoint = AnchorPoint.CC,
    ) -> None:
        super().__init__(sprite_id, transform, parent, anchor)
        self.highlight_sprite_id = highlight_sprite_id
        self.pressed_sprite_id = pressed_sprite_id
        self.button_func = button_func
        self.is_highlighted = False
        self.is_pressed = False

    def current_sprite_id(self) -> int:
        if self.is_pressed:
            return self.pressed_sprite_id
        if self.is_highlighted:
            return self.highlight_sprite_id
        return self.sprite_id

    def on_click(self, data: Any) -> None:
        """Run the callback with ``data`` if the button is highlighted."""
        if self.is_highlighted and self.button_func is not None:
            self.button_func(data)