"""Image tiles placed at a position on the final canvas."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image

from .vec2d import Vec2d


@dataclass(eq=False)
class Tile:
    """A decoded tile image and its top-left position in the full image."""

    image: Image.Image
    position: Vec2d

    def size(self) -> Vec2d:
        width, height = self.image.size
        return Vec2d(width, height)

    def bottom_right(self) -> Vec2d:
        return self.size() + self.position

    @classmethod
    def empty(cls, position: Vec2d, size: Vec2d) -> Tile:
        """A fully transparent tile of the given size."""
        return cls(Image.new("RGBA", (size.x, size.y)), position)

    @classmethod
    def from_bytes(cls, data: bytes, position: Vec2d) -> Tile:
        """Decode an encoded image (PNG, JPEG, ...) into a tile."""
        image = Image.open(io.BytesIO(data))
        image.load()
        return cls(image, position)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return (
            self.position == other.position
            and self.size() == other.size()
            and self.image.convert("RGBA").tobytes() == other.image.convert("RGBA").tobytes()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        width, height = self.image.size
        return f"Tile(x={self.position.x}, y={self.position.y}, width={width}, height={height})"