"""Shader programs and the orthographic projection they use."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

SAMPLER_COUNT = 32
TEXTURE_UNIFORM = "u_textures"
CAMERA_UNIFORM = "u_camera"
PROJECTION_UNIFORM = "ortho"


def read_shader_sources(vertex_path: str | Path, fragment_path: str | Path) -> tuple[str, str]:
    """Text of the vertex and fragment shader files."""
    return Path(vertex_path).read_text(), Path(fragment_path).read_text()


def projection_matrix(width: float, height: float) -> tuple[float, ...]:
    """Column-major 4x4 matrix mapping pixel offsets to clip space."""
    if width <= 0 or height <= 0:
        raise ValueError(f"viewport must be positive, got {width}x{height}")
    return (
        2.0 / width, 0.0, 0.0, 0.0,
        0.0, 2.0 / height, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    )


class Shader:
    """A linked vertex and fragment program registered with its window."""

    def __init__(self, vertex_path: str | Path, fragment_path: str | Path, window: Any) -> None:
        vertex_source, fragment_source = read_shader_sources(vertex_path, fragment_path)

        from pyglet.graphics.shader import Shader as ShaderStage
        from pyglet.graphics.shader import ShaderProgram

        self._window = window
        self._program = ShaderProgram(
            ShaderStage(vertex_source, "vertex"),
            ShaderStage(fragment_source, "fragment"),
        )
        self._program.use()
        self._set_uniform(TEXTURE_UNIFORM, tuple(range(SAMPLER_COUNT)))
        window.add_shader(self)
        self.bind()
        self.set_projection_matrix()
        self.unbind()

    def _set_uniform(self, name: str, value: Any) -> None:
        if name in self._program.uniforms:
            self._program[name] = value

    def bind(self) -> None:
        self._program.use()

    def unbind(self) -> None:
        self._program.stop()

    def uniform_location(self, name: str) -> int:
        """Location of a uniform, or -1 if the program has no such uniform."""
        uniform = self._program.uniforms.get(name)
        return -1 if uniform is None else uniform.location

    def set_projection_matrix(self, matrix: Optional[Sequence[float]] = None) -> None:
        """Upload ``matrix``, or the projection for the window's current size."""
        if matrix is None:
            res = self._window.resolution()
            matrix = projection_matrix(res.x, res.y)
        self._set_uniform(PROJECTION_UNIFORM, tuple(matrix))

    def set_camera_uniform(self, x: float, y: float, zoom: float) -> None:
        self._set_uniform(CAMERA_UNIFORM, (x, y, zoom))

    def release(self) -> None:
        self._program.delete()