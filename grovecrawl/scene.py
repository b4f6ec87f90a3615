"""Shared game services and the base class for scenes."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from grovecrawl.animation import AnimationManager
from grovecrawl.controls import InputState, RawGamepad
from grovecrawl.gametime import Clock
from grovecrawl.rng import RandomSource
from grovecrawl.shader import Shader


def _no_gamepads() -> Sequence[Optional[RawGamepad]]:
    return ()


@dataclass
class GameContext:
    """Services a scene works with.

    ``window`` and ``renderer`` are created by the game loop when left
    unset. ``shader_factory`` builds a shader from a vertex path, a
    fragment path and the window. ``gamepad_reader`` returns one reading
    per gamepad slot each frame.
    """

    input_state: InputState = field(default_factory=InputState)
    clock: Clock = field(default_factory=Clock)
    rng: RandomSource = field(default_factory=lambda: RandomSource(0))
    window: Any = None
    renderer: Any = None
    shader_factory: Callable[[str, str, Any], Any] = Shader
    gamepad_reader: Callable[[], Sequence[Optional[RawGamepad]]] = _no_gamepads
    animations: AnimationManager = field(init=False)

    def __post_init__(self) -> None:
        self.animations = AnimationManager(self.clock)


class Scene:
    """A game state driven by the loop; subclasses override the hooks."""

    def __init__(self, context: GameContext) -> None:
        self.context = context

    def start(self) -> None:
        """Called when the scene becomes active."""

    def update(self, dt: float) -> None:
        """Advance the scene by ``dt`` seconds."""

    def render(self, dt: float) -> None:
        """Draw the scene."""