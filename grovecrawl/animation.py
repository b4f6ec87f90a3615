"""Frame-based sprite animations driven by the game clock."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from grovecrawl.gametime import Clock


@dataclass(frozen=True)
class Animation:
    """Frames ``start_id`` through ``fin_id`` played at ``speed`` frames per second."""

    speed: float
    start_id: int
    fin_id: int


class AnimationType(Enum):
    PLAYER_IDLE = 0


_DEFAULT_ANIMATIONS = {
    AnimationType.PLAYER_IDLE: Animation(24.0, 256, 267),
}


class AnimationManager:
    """Looks up animations and works out the current frame."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._animations = dict(_DEFAULT_ANIMATIONS)

    def start_animation(self, kind: AnimationType) -> tuple[int, float]:
        """First frame of ``kind`` and the time point the animation starts at."""
        return self._animations[kind].start_id, self._clock.current_time()

    def continue_animation(self, kind: AnimationType, start_point: float) -> int:
        """Frame of ``kind`` to show now, looping since ``start_point``."""
        animation = self._animations[kind]
        frame_count = animation.fin_id - animation.start_id + 1
        elapsed = self._clock.current_time() - start_point
        return int(math.fmod(elapsed * animation.speed, frame_count)) + animation.start_id

    def get_animation(self, kind: AnimationType) -> Animation:
        return self._animations[kind]