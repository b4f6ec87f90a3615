"""Main loop that steps, updates and draws the active scene."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Optional

from grovecrawl.renderer import Renderer
from grovecrawl.scene import GameContext, Scene
from grovecrawl.window import Window

WINDOW_TITLE = "Test"
WINDOW_RESOLUTION = (1920, 1080)


class GameLoop:
    """Owns the active scene and runs frames until the window closes."""

    def __init__(self, context: GameContext) -> None:
        self.context = context
        self.active_scene: Optional[Scene] = None

    def init(self, scene: Scene) -> None:
        """Start the clock, seed randomness, open the window and start ``scene``."""
        context = self.context
        context.clock.init()
        context.rng.seed_from_time()
        if context.window is None:
            context.window = Window(WINDOW_TITLE, WINDOW_RESOLUTION, context.input_state)
        if context.renderer is None:
            _ = context.window.native
            context.renderer = Renderer(context.window.resolution)
        self.switch_scene(scene)

    def loop(self) -> None:
        """Run frames until the window stops, then shut down."""
        if self.active_scene is None:
            raise RuntimeError("no active scene; call init first")
        context = self.context
        while context.window.is_running():
            context.clock.step()
            dt = context.clock.delta_time()
            self.active_scene.update(dt)
            context.renderer.clear()
            self.active_scene.render(dt)
            context.window.swap_buffers()
            context.input_state.scan_keys(context.gamepad_reader())
        self.shutdown()

    def switch_scene(self, scene: Scene) -> None:
        self.active_scene = scene
        scene.start()

    def shutdown(self) -> None:
        self.active_scene = None
        context = self.context
        if context.renderer is not None:
            context.renderer.shutdown()
        if context.window is not None:
            context.window.shutdown()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the game window and play until it is closed."""
    from grovecrawl.game_scene import GameScene

    parser = argparse.ArgumentParser(prog="grovecrawl", description="Explore a grove of trees.")
    parser.parse_args(argv)
    context = GameContext()
    game = GameLoop(context)
    game.init(GameScene(context))
    game.loop()
    return 0