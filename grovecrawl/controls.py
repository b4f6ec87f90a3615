"""Keyboard, mouse and gamepad state with per-frame press/hold transitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from grovecrawl.geometry import Vec2

MAX_GAMEPADS = 4
BUTTON_COUNT = 14
AXIS_COUNT = 6
DEAD_ZONE = 0.2


class KeyState(IntEnum):
    KEY_RELEASE = 0
    KEY_PRESS = 1
    KEY_HOLD = 2
    KEY_NONE = 3


class Key(IntEnum):
    LEFT_MB = 0
    RIGHT_MB = 1
    MIDDLE_MB = 2
    W = 3
    A = 4
    S = 5
    D = 6
    SPACE = 7
    E = 8


class GamepadButton(IntEnum):
    A = 0
    B = 1
    X = 2
    Y = 3
    LB = 4
    RB = 5
    SELECT = 6
    START = 7
    L3 = 8
    R3 = 9
    UP = 10
    RIGHT = 11
    DOWN = 12
    LEFT = 13


class GamepadAxis(IntEnum):
    LEFT_X = 0
    LEFT_Y = 1
    RIGHT_X = 2
    RIGHT_Y = 3
    LT = 4
    RT = 5


@dataclass
class Gamepad:
    """Processed state of one gamepad."""

    buttons: list[KeyState] = field(
        default_factory=lambda: [KeyState.KEY_RELEASE] * BUTTON_COUNT
    )
    axes: list[float] = field(default_factory=lambda: [0.0] * AXIS_COUNT)


@dataclass(frozen=True)
class RawGamepad:
    """A device reading: axes in [-1, 1] and whether each button is down."""

    axes: Sequence[float] = ()
    buttons: Sequence[bool] = ()


def _filter_axis(index: int, value: float) -> float:
    if index in (GamepadAxis.RT, GamepadAxis.LT):
        return (value + 1.0) / 2.0
    if abs(value) < DEAD_ZONE:
        return 0.0
    return value - DEAD_ZONE if value > 0.0 else value + DEAD_ZONE


class InputState:
    """Input seen by the game, advanced once per frame by ``scan_keys``."""

    def __init__(self) -> None:
        self._keys = {key: KeyState.KEY_RELEASE for key in Key}
        self._last_keys = dict(self._keys)
        self._gamepads = [Gamepad() for _ in range(MAX_GAMEPADS)]
        self._last_buttons = [[KeyState.KEY_RELEASE] * BUTTON_COUNT for _ in range(MAX_GAMEPADS)]
        self._active_gamepads = 0
        self._mouse = (0.0, 0.0)

    def get_key(self, key: Key) -> KeyState:
        return self._keys[Key(key)]

    def set_key(self, key: Key, state: KeyState) -> None:
        self._keys[Key(key)] = KeyState(state)

    def scan_keys(self, raw_gamepads: Sequence[Optional[RawGamepad]] = ()) -> None:
        """Advance one frame.

        ``raw_gamepads`` holds a reading per slot, None for an absent pad.
        Button readings of every present pad come from the first slot, as
        the device layer reports them.
        """
        pads = list(raw_gamepads)
        if len(pads) > MAX_GAMEPADS:
            raise ValueError(f"at most {MAX_GAMEPADS} gamepads are supported, got {len(pads)}")
        pads += [None] * (MAX_GAMEPADS - len(pads))
        button_source = list(pads[0].buttons) if pads[0] is not None else []

        self._active_gamepads = 0
        for slot, raw in enumerate(pads):
            if raw is None:
                self._gamepads[slot] = Gamepad()
                continue
            self._active_gamepads += 1
            pad = self._gamepads[slot]
            for index, value in enumerate(list(raw.axes)[:AXIS_COUNT]):
                pad.axes[index] = _filter_axis(index, value)

            last = self._last_buttons[slot]
            for index, pressed in enumerate(button_source[:BUTTON_COUNT]):
                state = KeyState.KEY_PRESS if pressed else KeyState.KEY_RELEASE
                if state == KeyState.KEY_RELEASE and last[index] in (
                    KeyState.KEY_RELEASE, KeyState.KEY_NONE
                ):
                    state = KeyState.KEY_NONE
                elif state == KeyState.KEY_PRESS and last[index] in (
                    KeyState.KEY_PRESS, KeyState.KEY_HOLD
                ):
                    state = KeyState.KEY_HOLD
                pad.buttons[index] = state
                last[index] = state

        for key, state in self._keys.items():
            previous = self._last_keys[key]
            if state == KeyState.KEY_RELEASE and previous == KeyState.KEY_RELEASE:
                state = KeyState.KEY_NONE
            elif state == KeyState.KEY_PRESS and previous == KeyState.KEY_PRESS:
                state = KeyState.KEY_HOLD
            self._keys[key] = state
            self._last_keys[key] = state

    def _pad(self, gamepad: int) -> Gamepad:
        if not 0 <= gamepad < MAX_GAMEPADS:
            raise IndexError(f"gamepad {gamepad} outside 0..{MAX_GAMEPADS - 1}")
        return self._gamepads[gamepad]

    def get_gamepad_button(self, button: GamepadButton, gamepad: int = 0) -> KeyState:
        return self._pad(gamepad).buttons[GamepadButton(button)]

    def get_gamepad_axis(self, axis: GamepadAxis, gamepad: int = 0) -> float:
        return self._pad(gamepad).axes[GamepadAxis(axis)]

    def active_gamepads_count(self) -> int:
        return self._active_gamepads

    def set_mouse_pos(self, x: float, y: float) -> None:
        self._mouse = (float(x), float(y))

    def mouse_pos(self) -> Vec2:
        return Vec2(*self._mouse)