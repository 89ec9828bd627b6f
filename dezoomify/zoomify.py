"""Zoom levels for images in the Zoomify tile format."""

from __future__ import annotations

from dataclasses import dataclass

from .vec2d import Vec2d, tile_positions
from .zoomify_properties import ImageProperties, ZoomLevelInfo


class ZoomifyError(ValueError):
    """Raised when an ImageProperties.xml file cannot be parsed."""


@dataclass
class ZoomifyLevel:
    """One level of a Zoomify image."""

    base_url: str
    level_info: ZoomLevelInfo
    level: int

    def size(self) -> Vec2d:
        return self.level_info.size

    def tile_url(self, pos: Vec2d) -> str:
        group = self.level_info.tile_group(pos)
        return f"{self.base_url}/TileGroup{group}/{self.level}-{pos.x}-{pos.y}.jpg"

    def tile_references(self) -> list[tuple[str, Vec2d]]:
        """The URL and canvas position of every tile of this level, row by row."""
        tile_size = self.level_info.tile_size
        return [
            (self.tile_url(pos), tile_size * pos)
            for pos in tile_positions(self.size(), tile_size)
        ]

    def __repr__(self) -> str:
        return "Zoomify Image"


def load_from_properties(url: str, contents: bytes | str) -> list[ZoomifyLevel]:
    """The levels of the image described by an ImageProperties.xml file at ``url``."""
    try:
        properties = ImageProperties.parse(contents)
    except (ValueError, UnicodeDecodeError) as error:
        raise ZoomifyError(f"Unable to parse ImageProperties.xml: {error}") from error
    base_url = url.split("/ImageProperties.xml")[0]
    return [
        ZoomifyLevel(base_url=base_url, level_info=info, level=index)
        for index, info in enumerate(properties.levels())
    ]