"""Images cut into equally sized sprites and lookup across several sheets."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import NamedTuple, Optional

from PIL import Image

from grovecrawl.geometry import Vec2

BindTexture = Callable[[int], None]

_texture_ids = itertools.count(1)


class ImageLoadError(OSError):
    """An image file could not be read."""


class Sprite:
    """An RGBA image, stored bottom row first, with its own texture id."""

    def __init__(self, path: str | Path, sprite_size_x: int, sprite_size_y: int) -> None:
        if sprite_size_x <= 0 or sprite_size_y <= 0:
            raise ValueError(
                f"sprite size must be positive, got {sprite_size_x}x{sprite_size_y}"
            )
        try:
            with Image.open(path) as image:
                rgba = image.convert("RGBA").transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        except OSError as exc:
            raise ImageLoadError(f"failed to load image {path}") from exc
        self.path = Path(path)
        self.width, self.height = rgba.size
        self.pixels = rgba.tobytes()
        self.sprite_count = (self.width // sprite_size_x, self.height // sprite_size_y)
        self.texture_id = next(_texture_ids)

    def bind(self, bind_texture: BindTexture) -> None:
        """Hand this sprite's texture id to ``bind_texture``."""
        bind_texture(self.texture_id)


class SpriteSheet:
    """A sprite image divided into a grid of equally sized cells."""

    def __init__(self, path: str | Path, sprite_size_x: int, sprite_size_y: int) -> None:
        self.sprite = Sprite(path, sprite_size_x, sprite_size_y)
        columns, rows = self.sprite.sprite_count
        if columns == 0 or rows == 0:
            raise ValueError(
                f"image {path} is smaller than one {sprite_size_x}x{sprite_size_y} sprite"
            )

    @property
    def sprite_count(self) -> tuple[int, int]:
        return self.sprite.sprite_count

    @property
    def sprite_total(self) -> int:
        columns, rows = self.sprite_count
        return columns * rows

    def sprite_coords(self, x: int, y: int) -> Vec2:
        """Texture coordinates of the top-left corner of cell (x, y)."""
        columns, rows = self.sprite_count
        return Vec2(x / columns, 1.0 - y / rows)

    def sprite_coords_by_id(self, sprite_id: int) -> Vec2:
        """Texture coordinates of a cell numbered row by row from the top left."""
        columns = self.sprite_count[0]
        return self.sprite_coords(sprite_id % columns, sprite_id // columns)

    def sprite_size(self) -> Vec2:
        """Size of one cell in texture coordinates."""
        columns, rows = self.sprite_count
        return Vec2(1.0 / columns, 1.0 / rows)

    def bind(self, bind_texture: BindTexture) -> None:
        self.sprite.bind(bind_texture)


class SpriteRegion(NamedTuple):
    """Where a sprite lies: its sheet and its cell in texture coordinates."""

    corner: Vec2
    size: Vec2
    sheet_index: int


class SpriteSheetManager:
    """Numbers the sprites of several sheets consecutively."""

    def __init__(
        self,
        sprite_sheets: Iterable[SpriteSheet] = (),
        bind_texture: Optional[BindTexture] = None,
    ) -> None:
        self._bind_texture = bind_texture
        self._sheets: list[SpriteSheet] = []
        self._ends: list[int] = []
        for sheet in sprite_sheets:
            self.add_sprite_sheet(sheet)

    @property
    def sheets(self) -> tuple[SpriteSheet, ...]:
        return tuple(self._sheets)

    def __len__(self) -> int:
        return len(self._sheets)

    def add_sprite_sheet(self, sprite_sheet: SpriteSheet) -> None:
        start = self._ends[-1] if self._ends else 0
        self._ends.append(start + sprite_sheet.sprite_total)
        self._sheets.append(sprite_sheet)

    def clear_sprite_sheets(self) -> None:
        self._sheets.clear()
        self._ends.clear()

    def get_sprite(self, sprite_id: int) -> SpriteRegion:
        """Locate ``sprite_id`` and bind its sheet's texture."""
        start = 0
        for index, (sheet, end) in enumerate(zip(self._sheets, self._ends)):
            if start <= sprite_id < end:
                if self._bind_texture is not None:
                    sheet.bind(self._bind_texture)
                local = sprite_id - start
                return SpriteRegion(sheet.sprite_coords_by_id(local), sheet.sprite_size(), index)
            start = end
        raise IndexError(f"sprite {sprite_id} is outside the {start} loaded sprites")